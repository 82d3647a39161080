"""Tests for RBAC permission system."""

import asyncio

import pytest

from opsdesk.core.errors import InsufficientPermission, UnauthenticatedError
from opsdesk.core.rbac import Principal, UserRole
from opsdesk.core.rbac.permissions import Permission, Resource, Action, is_valid_permission
from opsdesk.core.rbac.checker import PermissionChecker, has_permission, require_permission
from opsdesk.core.rbac.roles import ROLE_PERMISSIONS, get_role_permissions


class TestPermissionModel:
    """Test permission definitions."""

    def test_permission_string_format(self):
        perm = Permission(Resource.APPROVALS, Action.RESOLVE)
        assert str(perm) == "approvals:resolve"

    def test_is_valid_permission(self):
        assert is_valid_permission("approvals:resolve")
        assert is_valid_permission("data:delete")
        assert not is_valid_permission("departments:delete")  # Directory is read-only
        assert not is_valid_permission("data:resolve")


class TestPermissionChecker:
    """Test PermissionChecker class."""

    def test_has_permission_exact_match(self):
        checker = PermissionChecker(["approvals:read", "approvals:list"])
        assert checker.has_permission("approvals:read")
        assert not checker.has_permission("approvals:resolve")

    def test_has_permission_resource_wildcard(self):
        checker = PermissionChecker(["data:*"])
        assert checker.has_permission("data:update")
        assert checker.has_permission("data:delete")
        assert not checker.has_permission("approvals:list")

    def test_global_wildcard(self):
        checker = PermissionChecker(["*:*"])
        assert checker.has_permission("approvals:delete")
        assert checker.has_permission(Permission(Resource.DEPARTMENTS, Action.LIST))

    def test_has_any_permission(self):
        checker = PermissionChecker(["data:read"])
        assert checker.has_any_permission(["data:read", "data:update"])
        assert not checker.has_any_permission(["data:update", "data:delete"])

    def test_has_permission_without_principal(self):
        assert not has_permission(None, "data:read")


class TestRolePermissions:
    """Test the fixed role permission sets."""

    def test_every_role_has_permissions(self):
        assert set(ROLE_PERMISSIONS) == set(UserRole)

    def test_role_permissions_come_from_matrix(self):
        for role in (UserRole.PLANNER, UserRole.INPUTTER, UserRole.VIEWER):
            assert all(is_valid_permission(p) for p in get_role_permissions(role))

    def test_admin_has_everything(self):
        admin = Principal(id=1, role=UserRole.ADMIN)
        assert has_permission(admin, "approvals:delete")
        assert has_permission(admin, "data:delete")

    def test_planner_resolves_but_cannot_delete_requests(self):
        planner = Principal(id=2, role=UserRole.PLANNER, department_id=1)
        assert has_permission(planner, "approvals:resolve")
        assert has_permission(planner, "approvals:list")
        assert not has_permission(planner, "approvals:delete")

    def test_inputter_submits_but_cannot_review(self):
        inputter = Principal(id=3, role=UserRole.INPUTTER)
        assert has_permission(inputter, "approvals:create")
        assert not has_permission(inputter, "approvals:list")
        assert not has_permission(inputter, "approvals:resolve")

    def test_viewer_is_read_only(self):
        perms = get_role_permissions(UserRole.VIEWER)
        assert "data:read" in perms
        assert not any(p.endswith((":create", ":update", ":delete", ":resolve")) for p in perms)

    def test_principal_accepts_role_string(self):
        principal = Principal(id=5, role="PLANNER", department_id=3)
        assert principal.role is UserRole.PLANNER
        assert principal.department_id == 3


class TestRequirePermissionDecorator:
    """Test the endpoint decorator."""

    @staticmethod
    @require_permission("approvals:list")
    async def _endpoint(principal=None):
        return "ok"

    def test_allows_principal_with_permission(self):
        planner = Principal(id=2, role=UserRole.PLANNER, department_id=1)
        assert asyncio.run(self._endpoint(principal=planner)) == "ok"

    def test_rejects_principal_without_permission(self):
        inputter = Principal(id=3, role=UserRole.INPUTTER)
        with pytest.raises(InsufficientPermission) as exc_info:
            asyncio.run(self._endpoint(principal=inputter))
        assert "approvals:list" in exc_info.value.message

    def test_rejects_missing_principal(self):
        with pytest.raises(UnauthenticatedError):
            asyncio.run(self._endpoint())
