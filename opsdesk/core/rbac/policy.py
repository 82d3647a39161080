"""Department-scoped authorization policy.

Pure decision functions over a principal and a resource's owning
department (and creator). Each ``can_*`` function has a ``require_*``
guard that raises ``InsufficientPermission`` instead of returning False.
"""

from typing import Iterable, Optional

from opsdesk.core.errors import InsufficientPermission

from .principal import Principal
from .roles import UserRole


def can_access_department(principal: Principal, department_id: Optional[int]) -> bool:
    """Read access: everyone but a planner sees every department."""
    if principal.role in (UserRole.ADMIN, UserRole.INPUTTER, UserRole.VIEWER):
        return True

    if principal.role == UserRole.PLANNER and principal.department_id is not None:
        return principal.department_id == department_id

    return False


def require_department_access(principal: Principal, department_id: Optional[int]) -> None:
    if not can_access_department(principal, department_id):
        raise InsufficientPermission("Access denied to this department")


def can_create_in_department(principal: Principal, department_id: Optional[int]) -> bool:
    """Same as access, minus the read-only viewer."""
    if principal.role == UserRole.VIEWER:
        return False
    return can_access_department(principal, department_id)


def require_create_permission(principal: Principal, department_id: Optional[int]) -> None:
    if not can_create_in_department(principal, department_id):
        raise InsufficientPermission("No permission to create in this department")


def can_modify_resource(
    principal: Principal,
    resource_department_id: Optional[int],
    resource_creator_id: Optional[int] = None,
) -> bool:
    """Admins modify anything, planners their department, inputters their own records."""
    if principal.role == UserRole.ADMIN:
        return True

    if principal.role == UserRole.PLANNER and principal.department_id is not None:
        return principal.department_id == resource_department_id

    if principal.role == UserRole.INPUTTER and resource_creator_id is not None:
        return principal.id == resource_creator_id

    return False


def require_modify_permission(
    principal: Principal,
    resource_department_id: Optional[int],
    resource_creator_id: Optional[int] = None,
) -> None:
    if not can_modify_resource(principal, resource_department_id, resource_creator_id):
        raise InsufficientPermission("No permission to modify this resource")


def can_delete_resource(principal: Principal) -> bool:
    return principal.role == UserRole.ADMIN


def require_delete_permission(principal: Principal) -> None:
    if not can_delete_resource(principal):
        raise InsufficientPermission("Only admin can delete resources")


def require_role(principal: Principal, allowed_roles: Iterable[UserRole]) -> None:
    if principal.role not in set(allowed_roles):
        raise InsufficientPermission()
