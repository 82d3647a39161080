"""The authenticated actor of a request."""

from dataclasses import dataclass
from typing import Optional

from .roles import UserRole, get_role_permissions


@dataclass(frozen=True)
class Principal:
    """Identity, role and optional department of the current user.

    Built per request from the auth token; never persisted here.
    """

    id: int
    role: UserRole
    department_id: Optional[int] = None
    department_name: Optional[str] = None

    def __post_init__(self):
        # Accept plain strings from token claims
        object.__setattr__(self, "role", UserRole(self.role))

    @property
    def permissions(self) -> list[str]:
        return get_role_permissions(self.role)
