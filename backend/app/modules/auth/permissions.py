"""
Role-based access policy for NexByte.

Every role check in the API goes through `is_allowed(role, resource, action)`.
Admins may do anything; other roles get exactly what POLICY lists.

Actions suffixed with `_own` are scoped to records the caller owns
(their tasks, their bills, their certificate). The endpoint is responsible
for applying that scope to the query.
"""
from typing import Dict, Set, Union

from app.models.user import UserRole


ALL = "*"

# role -> resource -> allowed actions
POLICY: Dict[UserRole, Dict[str, Set[str]]] = {
    UserRole.ADMIN: {ALL: {ALL}},
    UserRole.MEMBER: {
        "projects": {"list_own"},
        "tasks": {"read", "list_own", "update_own"},
        "resources": {"list", "read"},
    },
    UserRole.INTERN: {
        "projects": {"list_own"},
        "tasks": {"read", "list_own", "update_own"},
        "resources": {"list", "read"},
        "internships": {"read_own"},
        "certificates": {"read_own"},
        "applications": {"read_own"},
        "profile": {"update_own", "respond_offer"},
    },
    UserRole.CLIENT: {
        "clients": {"read_own"},
        "bills": {"list_own", "pay"},
        "messages": {"create"},
        "resources": {"list", "read"},
    },
    UserRole.USER: {
        "resources": {"list", "read"},
        "applications": {"read_own"},
    },
}


def is_allowed(role: Union[UserRole, str], resource: str, action: str) -> bool:
    """Return True if `role` may perform `action` on `resource`."""
    try:
        role = UserRole(role)
    except ValueError:
        return False

    grants = POLICY.get(role, {})
    for resource_key in (resource, ALL):
        actions = grants.get(resource_key)
        if actions and (action in actions or ALL in actions):
            return True
    return False
