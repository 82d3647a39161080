"""Role definitions for OpsDesk.

Four fixed roles, ordered by privilege breadth:
1. Admin - Unrestricted
2. Planner - Scoped to one department, resolves approval requests
3. Inputter - All departments, data changes go through approval
4. Viewer - Read-only, all departments
"""

from enum import Enum
from typing import Dict, List

from .permissions import Resource, Action, Permission, is_valid_permission


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    PLANNER = "PLANNER"
    INPUTTER = "INPUTTER"
    VIEWER = "VIEWER"


def _build_permissions(*perms: tuple) -> List[str]:
    """Build permission strings from (Resource, Action) tuples."""
    result = [str(Permission(r, a)) for r, a in perms]
    for perm in result:
        if not is_valid_permission(perm):
            raise ValueError(f"Permission not in matrix: {perm}")
    return result


ADMIN_PERMISSIONS = [
    "*:*"  # Global wildcard - all permissions
]

PLANNER_PERMISSIONS = _build_permissions(
    (Resource.APPROVALS, Action.CREATE),
    (Resource.APPROVALS, Action.READ),
    (Resource.APPROVALS, Action.LIST),
    (Resource.APPROVALS, Action.RESOLVE),

    # Deletions are submitted for admin sign-off, not applied
    (Resource.DATA, Action.CREATE),
    (Resource.DATA, Action.READ),
    (Resource.DATA, Action.LIST),
    (Resource.DATA, Action.UPDATE),
    (Resource.DATA, Action.DELETE),

    (Resource.DEPARTMENTS, Action.READ),
    (Resource.DEPARTMENTS, Action.LIST),
)

INPUTTER_PERMISSIONS = _build_permissions(
    (Resource.APPROVALS, Action.CREATE),

    # Updates and deletions become approval requests
    (Resource.DATA, Action.CREATE),
    (Resource.DATA, Action.READ),
    (Resource.DATA, Action.LIST),
    (Resource.DATA, Action.UPDATE),
    (Resource.DATA, Action.DELETE),

    (Resource.DEPARTMENTS, Action.READ),
    (Resource.DEPARTMENTS, Action.LIST),
)

VIEWER_PERMISSIONS = _build_permissions(
    (Resource.DATA, Action.READ),
    (Resource.DATA, Action.LIST),
    (Resource.DEPARTMENTS, Action.READ),
    (Resource.DEPARTMENTS, Action.LIST),
)


ROLE_PERMISSIONS: Dict[UserRole, List[str]] = {
    UserRole.ADMIN: ADMIN_PERMISSIONS,
    UserRole.PLANNER: PLANNER_PERMISSIONS,
    UserRole.INPUTTER: INPUTTER_PERMISSIONS,
    UserRole.VIEWER: VIEWER_PERMISSIONS,
}


def get_role_permissions(role: UserRole) -> List[str]:
    """Get permissions list for a role."""
    try:
        return ROLE_PERMISSIONS[UserRole(role)]
    except ValueError:
        raise ValueError(f"Unknown role: {role}")
