# Authentication module

from app.modules.auth.dependencies import (
    get_current_user,
    get_current_admin,
    require_permission,
)

from app.modules.auth.permissions import (
    POLICY,
    is_allowed,
)

__all__ = [
    # User authentication
    "get_current_user",
    "get_current_admin",
    "require_permission",
    # Policy
    "POLICY",
    "is_allowed",
]
