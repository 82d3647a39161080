"""RBAC (Role-Based Access Control) module for OpsDesk.

Role permissions gate the endpoints; the department policy decides access
to individual records.
"""

from .permissions import Permission, Resource, Action, PERMISSION_DEFINITIONS
from .roles import UserRole
from .principal import Principal
from .checker import PermissionChecker, has_permission, require_permission
from .policy import (
    can_access_department,
    can_create_in_department,
    can_modify_resource,
    can_delete_resource,
    require_department_access,
    require_create_permission,
    require_modify_permission,
    require_delete_permission,
    require_role,
)

__all__ = [
    "Permission",
    "Resource",
    "Action",
    "PERMISSION_DEFINITIONS",
    "UserRole",
    "Principal",
    "PermissionChecker",
    "has_permission",
    "require_permission",
    "can_access_department",
    "can_create_in_department",
    "can_modify_resource",
    "can_delete_resource",
    "require_department_access",
    "require_create_permission",
    "require_modify_permission",
    "require_delete_permission",
    "require_role",
]
