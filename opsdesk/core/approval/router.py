"""Approval policy router.

The single place that decides, from the requester's role, whether a
mutation is applied right away or goes through one or two approval stages.
"""

from enum import Enum

from opsdesk.core.errors import InsufficientPermission, UnknownRequestTypeError
from opsdesk.core.rbac.roles import UserRole

from .states import ApprovalStatus, RequestType


class MutationPath(str, Enum):
    IMMEDIATE = "immediate"          # Applied directly, no request
    SINGLE_STAGE = "single_stage"    # PENDING, resolved by admin or planner
    TWO_STAGE = "two_stage"          # PENDING_ADMIN_APPROVAL, admin only


# role -> request type -> path; roles missing here may not mutate at all
_PATHS: dict[UserRole, dict[RequestType, MutationPath]] = {
    UserRole.ADMIN: {
        RequestType.DATA_CHANGE: MutationPath.IMMEDIATE,
        RequestType.DATA_DELETION: MutationPath.IMMEDIATE,
    },
    UserRole.PLANNER: {
        RequestType.DATA_CHANGE: MutationPath.IMMEDIATE,
        RequestType.DATA_DELETION: MutationPath.TWO_STAGE,
    },
    UserRole.INPUTTER: {
        RequestType.DATA_CHANGE: MutationPath.SINGLE_STAGE,
        RequestType.DATA_DELETION: MutationPath.SINGLE_STAGE,
    },
}


def initial_status(requester_role: UserRole) -> ApprovalStatus:
    """Status a newly submitted request starts in.

    Planner submissions always need admin sign-off.
    """
    if UserRole(requester_role) == UserRole.PLANNER:
        return ApprovalStatus.PENDING_ADMIN_APPROVAL
    return ApprovalStatus.PENDING


def should_require_approval(role: UserRole) -> bool:
    """Only inputters need approval for plain data changes."""
    paths = _PATHS.get(UserRole(role))
    if paths is None:
        return False
    return paths[RequestType.DATA_CHANGE] != MutationPath.IMMEDIATE


def decide_path(role: UserRole, request_type: str, *, department_scoped: bool = True) -> MutationPath:
    """
    Decide how a mutation by ``role`` is carried out.

    Bureau-wide tables (no owning department) are outside every planner's
    scope, so planner changes to them are escalated to an admin.

    Raises:
        UnknownRequestTypeError: If ``request_type`` is not a known mutation
        InsufficientPermission: If the role may not mutate data
    """
    try:
        request_type = RequestType(request_type)
    except ValueError:
        raise UnknownRequestTypeError(str(request_type))

    role = UserRole(role)
    paths = _PATHS.get(role)
    if paths is None:
        raise InsufficientPermission("Read-only role cannot modify data")

    path = paths[request_type]
    if role == UserRole.PLANNER and not department_scoped and path == MutationPath.IMMEDIATE:
        return MutationPath.TWO_STAGE
    return path
