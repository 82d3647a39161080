"""Approval state machine implementation.

Validates a resolution against the transition table and the resolver's
role and department before anything is written.
"""

from typing import Optional

from opsdesk.core.errors import InsufficientPermission, InvalidStateError, ValidationError
from opsdesk.core.rbac import Principal, UserRole

from .states import (
    ApprovalStatus,
    DECISIONS,
    TransitionRule,
    get_transition_rule,
    is_terminal,
    resolver_roles_for,
)


class ApprovalStateMachine:
    """
    State machine for a single approval request.

    Decides whether ``principal`` may move the request from its current
    status to the requested decision. Persistence is the caller's job.
    """

    def __init__(
        self,
        request_id: int,
        current_status: ApprovalStatus,
        *,
        department_id: Optional[int] = None,
    ):
        self.request_id = request_id
        self._status = ApprovalStatus(current_status)
        self.department_id = department_id

    @property
    def status(self) -> ApprovalStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._status)

    def can_resolve(self, principal: Principal) -> bool:
        """Check whether the principal may resolve the request right now."""
        try:
            self._check_resolver(principal)
        except (InvalidStateError, InsufficientPermission):
            return False
        return True

    def resolve(self, principal: Principal, decision: ApprovalStatus) -> TransitionRule:
        """
        Validate a resolution and advance the in-memory status.

        Returns:
            The transition rule that applies

        Raises:
            ValidationError: If ``decision`` is not APPROVED or REJECTED
            InvalidStateError: If the request is no longer open
            InsufficientPermission: If the principal may not resolve it
        """
        try:
            decision = ApprovalStatus(decision)
        except ValueError:
            raise ValidationError(f"Invalid decision: {decision}")
        if decision not in DECISIONS:
            raise ValidationError(f"Invalid decision: {decision.value}")

        self._check_resolver(principal)

        rule = get_transition_rule(self._status, decision)
        if rule is None:
            raise InvalidStateError(
                f"Cannot move request {self.request_id} from {self._status.value} to {decision.value}"
            )

        self._status = rule.to_status
        return rule

    def _check_resolver(self, principal: Principal) -> None:
        if self.is_terminal:
            raise InvalidStateError(
                f"Approval request {self.request_id} is already {self._status.value}"
            )

        if principal.role not in resolver_roles_for(self._status):
            raise InsufficientPermission("Cannot approve this request")

        # Planners only act on their own department's requests
        if (
            principal.role == UserRole.PLANNER
            and self.department_id is not None
            and principal.department_id != self.department_id
        ):
            raise InsufficientPermission("Access denied to this department")
