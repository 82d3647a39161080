"""Permission model for OpsDesk RBAC.

Defines all resources, actions, and permission combinations.
Uses a matrix approach: permissions = actions × resources.

Permission string format: "resource:action"
Examples:
  - approvals:resolve
  - data:update
"""

from enum import Enum
from typing import NamedTuple, FrozenSet


class Resource(str, Enum):
    """Resources that can be protected by permissions."""

    APPROVALS = "approvals"       # Approval requests for data changes
    DATA = "data"                 # Operational records (reports, orders, incidents, ...)
    DEPARTMENTS = "departments"   # Department directory


class Action(str, Enum):
    """Actions that can be performed on resources."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"

    RESOLVE = "resolve"           # Approve or reject a pending request


class Permission(NamedTuple):
    """A permission is a combination of resource and action."""
    resource: Resource
    action: Action

    def __str__(self) -> str:
        return f"{self.resource.value}:{self.action.value}"


# Maps each resource to its valid actions
PERMISSION_MATRIX: dict[Resource, FrozenSet[Action]] = {
    Resource.APPROVALS: frozenset([
        Action.CREATE, Action.READ, Action.LIST, Action.RESOLVE, Action.DELETE,
    ]),
    Resource.DATA: frozenset([
        Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE, Action.LIST,
    ]),
    Resource.DEPARTMENTS: frozenset([
        Action.READ, Action.LIST,
    ]),
}


def _generate_permission_definitions() -> dict[str, Permission]:
    """Generate all valid permission combinations from the matrix."""
    permissions = {}
    for resource, actions in PERMISSION_MATRIX.items():
        for action in actions:
            perm = Permission(resource, action)
            permissions[str(perm)] = perm
    return permissions


# All valid permissions as a dictionary: "resource:action" -> Permission
PERMISSION_DEFINITIONS = _generate_permission_definitions()


def is_valid_permission(perm_str: str) -> bool:
    """Check if a permission string is valid."""
    return perm_str in PERMISSION_DEFINITIONS
