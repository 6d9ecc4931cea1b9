from pydantic import BaseModel

from challengehub.core.enums.user_types import UserRole


class Identity(BaseModel):
    """Caller identity as attached by the upstream authentication gateway."""
    user_id: int
    role: UserRole