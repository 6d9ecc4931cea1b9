import logging

import structlog
from structlog.stdlib import LoggerFactory

from challengehub.core.constants import LOG_LEVEL, SERVICE_NAME

logging.basicConfig(level=LOG_LEVEL, format="%(message)s")

structlog.configure(
    logger_factory=LoggerFactory(),
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
)

# Every event carries the service name.
logger = structlog.get_logger().bind(service=SERVICE_NAME)
