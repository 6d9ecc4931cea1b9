from .security import (
    get_current_identity,
    require_manager,
    require_user_roles,
)
