# challengehub/core/types.py
from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from challengehub.core.enums.user_types import UserRole, normalize_role
from challengehub.core.logger import logger


class UserRoleType(TypeDecorator):
    """Role column stored as its plain label, read back as a UserRole.

    Historical labels ("fbo", "marraine") are normalized on the way in and out,
    so nothing past the ORM ever compares raw strings. A stored label outside
    the known set reads back as None.
    """
    impl = String(50)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return normalize_role(value).value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        try:
            return normalize_role(value)
        except ValueError:
            logger.warning("users.unknown_role", role=value)
            return None
