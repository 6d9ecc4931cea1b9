# challengehub/auth/utils/security.py

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from challengehub.auth.schemas import Identity
from challengehub.core.enums.user_types import UserRole, normalize_role
from challengehub.core.logger import logger


def get_current_identity(
    x_user_id: Optional[str] = Header(None, description="Authenticated user id set by the gateway"),
    x_user_role: Optional[str] = Header(None, description="Authenticated user role set by the gateway"),
) -> Identity:
    """Build the caller identity; legacy role labels are normalized here and nowhere else."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )
    if not x_user_id or not x_user_role:
        raise credentials_exception
    try:
        return Identity(user_id=int(x_user_id), role=normalize_role(x_user_role))
    except ValueError:
        logger.info("auth.invalid_identity", user_id=x_user_id, role=x_user_role)
        raise credentials_exception from None


def require_user_roles(roles: list[UserRole]):
    """Dependency to enforce one of the given roles."""
    def role_checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return identity
    return role_checker


require_manager = require_user_roles([UserRole.MANAGER, UserRole.TOP])
