"""Approval workflow module for OpsDesk.

Implements the approval state machine, the policy router that picks a
mutation path per role, and the engine that applies approved changes.
"""

from .states import ApprovalStatus, ApprovalAction, RequestType, TRANSITIONS
from .machine import ApprovalStateMachine
from .router import MutationPath, decide_path, initial_status, should_require_approval
from .dispatcher import TableDispatcher, TableHandler, default_dispatcher
from .manager import ApplyResult, ApprovalManager
from .service import ApprovalPage, ApprovalService
from .mutations import MutationResult, MutationService

__all__ = [
    "ApprovalStatus",
    "ApprovalAction",
    "RequestType",
    "TRANSITIONS",
    "ApprovalStateMachine",
    "MutationPath",
    "decide_path",
    "initial_status",
    "should_require_approval",
    "TableDispatcher",
    "TableHandler",
    "default_dispatcher",
    "ApplyResult",
    "ApprovalManager",
    "ApprovalPage",
    "ApprovalService",
    "MutationResult",
    "MutationService",
]
