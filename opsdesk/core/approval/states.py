"""Approval request statuses and transitions.

State Machine Diagram:

    submit (PLANNER)                  ┌──────────┐
    ───────────────► PENDING_ADMIN ──►│ APPROVED │──► apply
                     _APPROVAL   │    └──────────┘
                                 │    ┌──────────┐
                                 └───►│ REJECTED │
    submit (other)                    └──────────┘
    ───────────────► PENDING ──────► APPROVED / REJECTED

PENDING and PENDING_ADMIN_APPROVAL are open; APPROVED and REJECTED are
terminal and never transition again.
"""

from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Optional, Set

from opsdesk.core.rbac.roles import UserRole


class ApprovalStatus(str, Enum):
    """Lifecycle status of an approval request."""

    PENDING = "PENDING"                                # Awaiting admin or planner
    PENDING_ADMIN_APPROVAL = "PENDING_ADMIN_APPROVAL"  # Submitted by a planner, admin only

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ApprovalAction(str, Enum):
    """Events recorded in the approval history."""

    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"


class RequestType(str, Enum):
    """Mutation kinds the apply engine knows how to materialize."""

    DATA_CHANGE = "data_change"
    DATA_DELETION = "data_deletion"


class TransitionRule(NamedTuple):
    """Defines a valid resolution of an open request."""
    from_status: ApprovalStatus
    to_status: ApprovalStatus
    action: ApprovalAction
    resolver_roles: FrozenSet[UserRole]


_ADMIN_OR_PLANNER = frozenset([UserRole.ADMIN, UserRole.PLANNER])
_ADMIN_ONLY = frozenset([UserRole.ADMIN])

TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.APPROVED, ApprovalAction.APPROVE, _ADMIN_OR_PLANNER),
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.REJECTED, ApprovalAction.REJECT, _ADMIN_OR_PLANNER),
    TransitionRule(ApprovalStatus.PENDING_ADMIN_APPROVAL, ApprovalStatus.APPROVED, ApprovalAction.APPROVE, _ADMIN_ONLY),
    TransitionRule(ApprovalStatus.PENDING_ADMIN_APPROVAL, ApprovalStatus.REJECTED, ApprovalAction.REJECT, _ADMIN_ONLY),
]

TRANSITIONS: Dict[tuple[ApprovalStatus, ApprovalStatus], TransitionRule] = {
    (rule.from_status, rule.to_status): rule for rule in TRANSITION_RULES
}

# Who may resolve a request, by its current status
RESOLVER_ROLES: Dict[ApprovalStatus, FrozenSet[UserRole]] = {
    ApprovalStatus.PENDING: _ADMIN_OR_PLANNER,
    ApprovalStatus.PENDING_ADMIN_APPROVAL: _ADMIN_ONLY,
}

PENDING_STATUSES: Set[ApprovalStatus] = {
    ApprovalStatus.PENDING,
    ApprovalStatus.PENDING_ADMIN_APPROVAL,
}

TERMINAL_STATUSES: Set[ApprovalStatus] = {
    ApprovalStatus.APPROVED,
    ApprovalStatus.REJECTED,
}

# Decisions a resolver may submit
DECISIONS: Set[ApprovalStatus] = TERMINAL_STATUSES

# Listing order: open requests first
STATUS_SORT_ORDER: Dict[ApprovalStatus, int] = {
    ApprovalStatus.PENDING: 0,
    ApprovalStatus.PENDING_ADMIN_APPROVAL: 1,
    ApprovalStatus.APPROVED: 2,
    ApprovalStatus.REJECTED: 3,
}


def is_pending(status: ApprovalStatus) -> bool:
    return ApprovalStatus(status) in PENDING_STATUSES


def is_terminal(status: ApprovalStatus) -> bool:
    return ApprovalStatus(status) in TERMINAL_STATUSES


def get_transition_rule(from_status: ApprovalStatus, to_status: ApprovalStatus) -> Optional[TransitionRule]:
    """Get the rule for resolving ``from_status`` into ``to_status``, if any."""
    return TRANSITIONS.get((ApprovalStatus(from_status), ApprovalStatus(to_status)))


def resolver_roles_for(status: ApprovalStatus) -> FrozenSet[UserRole]:
    """Roles allowed to resolve a request in ``status`` (empty when terminal)."""
    return RESOLVER_ROLES.get(ApprovalStatus(status), frozenset())
