"""Permission checking utilities for OpsDesk.

Provides decorators and utilities for enforcing RBAC permissions.
"""

from functools import wraps
from typing import Callable, Union, List

from opsdesk.core.errors import InsufficientPermission, UnauthenticatedError

from .permissions import Permission
from .principal import Principal


class PermissionChecker:
    """Checks if a principal has specific permissions based on their role."""

    def __init__(self, user_permissions: list[str]):
        self.permissions = set(user_permissions)

    @classmethod
    def for_principal(cls, principal: Principal) -> "PermissionChecker":
        return cls(principal.permissions)

    def has_permission(self, permission: Union[str, Permission]) -> bool:
        """Check if user has a specific permission."""
        perm_str = str(permission) if isinstance(permission, Permission) else permission

        if perm_str in self.permissions:
            return True

        if ":" in perm_str:
            resource = perm_str.split(":")[0]
            if f"{resource}:*" in self.permissions:
                return True
            # Global admin wildcard
            if "*:*" in self.permissions:
                return True

        return False

    def has_any_permission(self, permissions: List[Union[str, Permission]]) -> bool:
        return any(self.has_permission(p) for p in permissions)


def has_permission(principal: Principal, permission: Union[str, Permission]) -> bool:
    """Check if a principal has a specific permission."""
    if not principal:
        return False
    return PermissionChecker.for_principal(principal).has_permission(permission)


def require_permission(*permissions: Union[str, Permission]):
    """
    Decorator factory for FastAPI endpoints requiring specific permissions.

    Args:
        permissions: One or more permission strings or Permission objects; any one grants access

    Usage:
        @router.get("/approvals")
        @require_permission("approvals:list")
        async def list_approvals(principal: Principal = Depends(get_current_principal)):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            principal = kwargs.get("principal")
            if not principal:
                for arg in args:
                    if isinstance(arg, Principal):
                        principal = arg
                        break

            if not principal:
                raise UnauthenticatedError()

            checker = PermissionChecker.for_principal(principal)
            perm_strs = [str(p) if isinstance(p, Permission) else p for p in permissions]

            if not checker.has_any_permission(perm_strs):
                raise InsufficientPermission(
                    f"Insufficient permissions. Required: {', '.join(perm_strs)}"
                )

            return await func(*args, **kwargs)

        return wrapper
    return decorator
