"""Approval service for managing data-change approval workflows.

Provides the high-level API route handlers use: creating requests,
listing the queue, resolving requests (with the apply step) and deleting
them. The service flushes; committing is left to the caller.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import case, func, or_, update
from sqlalchemy.orm import Session

from opsdesk.core.config import get_settings
from opsdesk.core.errors import (
    ApplyFailedError,
    InsufficientPermission,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from opsdesk.core.logger import get_logger
from opsdesk.core.rbac import (
    Principal,
    UserRole,
    has_permission,
    require_create_permission,
    require_role,
)
from opsdesk.db.models import ApprovalHistory, ApprovalRequest

from .dispatcher import TableDispatcher, default_dispatcher
from .machine import ApprovalStateMachine
from .manager import ApprovalManager
from .router import initial_status
from .states import (
    ApprovalAction,
    ApprovalStatus,
    RequestType,
    STATUS_SORT_ORDER,
    is_terminal,
)

logger = get_logger(__name__)


def _field_error(field_name: str, message: str) -> ValidationError:
    return ValidationError(message, details=[{"field": field_name, "message": message}])


@dataclass
class ApprovalPage:
    """One page of the approval queue plus per-status counts."""

    items: List[ApprovalRequest]
    total: int
    page: int
    limit: int
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class ApprovalService:
    """
    High-level service for approval requests.

    Handles:
    - Creating requests with a role-dependent initial status
    - Listing with role scoping, pending-first ordering and statistics
    - Resolving requests and applying approved changes atomically
    - Administrative deletion
    """

    def __init__(self, db: Session, dispatcher: Optional[TableDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher or default_dispatcher
        self.settings = get_settings()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_approval_request(
        self,
        principal: Principal,
        *,
        request_type: str,
        table_name: str,
        new_data: Optional[Dict[str, Any]],
        record_id: Optional[int] = None,
        old_data: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
        department_id: Optional[int] = None,
    ) -> ApprovalRequest:
        """
        Persist a proposed mutation on behalf of ``principal``.

        The initial status depends on the requester's role: planner
        submissions wait for an admin.

        Raises:
            InsufficientPermission: If the principal may not submit requests
            ValidationError: If the type, table or payload is missing or invalid
        """
        if not has_permission(principal, "approvals:create"):
            raise InsufficientPermission("Read-only role cannot submit approval requests")

        request_type = (request_type or "").strip()
        table_name = (table_name or "").strip()
        if not request_type:
            raise _field_error("requestType", "Request type is required")
        if not table_name:
            raise _field_error("tableName", "Table name is required")
        if new_data is None or not isinstance(new_data, dict):
            raise _field_error("newData", "New data is required")
        if record_id is not None and record_id <= 0:
            raise _field_error("recordId", "Record ID must be a positive integer")

        if self.dispatcher.supports(table_name):
            handler = self.dispatcher.get_handler(table_name)
            if request_type == RequestType.DATA_CHANGE.value:
                handler.validate(new_data)
            if department_id is None and record_id is not None:
                record = handler.get(self.db, record_id)
                if record is not None:
                    department_id = handler.department_of(record)
        if department_id is None and isinstance(new_data.get("_departmentId"), int):
            department_id = new_data["_departmentId"]

        status = initial_status(principal.role)
        request = ApprovalRequest(
            requester_id=principal.id,
            status=status.value,
            request_type=request_type,
            table_name=table_name,
            record_id=record_id,
            department_id=department_id,
            old_data=old_data,
            new_data=new_data,
            reason=reason,
        )
        self.db.add(request)
        self.db.flush()

        self._record_history(request, None, status, ApprovalAction.SUBMIT, principal.id, reason)

        logger.info(
            "Approval request %s created by user %s: %s on %s#%s [%s]",
            request.id, principal.id, request_type, table_name, record_id, status.value,
        )
        return request

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_approval_request(self, request_id: int) -> Optional[ApprovalRequest]:
        return self.db.get(ApprovalRequest, request_id)

    def get_or_404(self, request_id: int) -> ApprovalRequest:
        request = self.get_approval_request(request_id)
        if request is None:
            raise NotFoundError("Approval request not found")
        return request

    def get_visible_request(self, principal: Principal, request_id: int) -> ApprovalRequest:
        """
        Fetch a request the principal is allowed to see.

        Planners see exactly what their listing shows: ``PENDING`` requests
        of their department or with no department. Anything else is a 404.
        """
        self._require_reviewer(principal)
        request = self.get_or_404(request_id)
        if principal.role == UserRole.PLANNER and not self._planner_can_see(principal, request):
            raise NotFoundError("Approval request not found")
        return request

    def get_history(self, principal: Principal, request_id: int) -> List[ApprovalHistory]:
        request = self.get_visible_request(principal, request_id)
        return list(request.history)

    def list_approval_requests(
        self,
        principal: Principal,
        *,
        status: Optional[str] = None,
        request_type: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> ApprovalPage:
        """
        List approval requests, open ones first, newest first within a status.

        Planners only ever see ``PENDING`` requests of their own department
        (or with no department).
        """
        self._require_reviewer(principal)

        if limit is None:
            limit = self.settings.approval_default_page_size
        if page < 1:
            raise ValidationError("Page must be at least 1")
        if limit < 1 or limit > self.settings.approval_max_page_size:
            raise ValidationError(f"Limit must be between 1 and {self.settings.approval_max_page_size}")

        scope = self._scope_filters(principal, request_type)

        filters = list(scope)
        if status:
            try:
                status = ApprovalStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid status: {status}")
            filters.append(ApprovalRequest.status == status.value)

        query = self.db.query(ApprovalRequest).filter(*filters)
        total = query.count()

        status_rank = case(
            {s.value: rank for s, rank in STATUS_SORT_ORDER.items()},
            value=ApprovalRequest.status,
            else_=len(STATUS_SORT_ORDER),
        )
        items = (
            query.order_by(status_rank.asc(), ApprovalRequest.created_at.desc(), ApprovalRequest.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return ApprovalPage(
            items=items,
            total=total,
            page=page,
            limit=limit,
            stats=self.get_stats(principal, request_type=request_type),
        )

    def get_stats(self, principal: Principal, *, request_type: Optional[str] = None) -> Dict[str, int]:
        """Counts per status within what the principal may see."""
        rows = (
            self.db.query(ApprovalRequest.status, func.count(ApprovalRequest.id))
            .filter(*self._scope_filters(principal, request_type))
            .group_by(ApprovalRequest.status)
            .all()
        )
        counts = {status: count for status, count in rows}
        return {
            "total": sum(counts.values()),
            "pending": counts.get(ApprovalStatus.PENDING.value, 0),
            "pendingAdminApproval": counts.get(ApprovalStatus.PENDING_ADMIN_APPROVAL.value, 0),
            "approved": counts.get(ApprovalStatus.APPROVED.value, 0),
            "rejected": counts.get(ApprovalStatus.REJECTED.value, 0),
        }

    # ------------------------------------------------------------------
    # Resolve
    # ------------------------------------------------------------------

    def resolve_approval_request(
        self,
        principal: Principal,
        request_id: int,
        decision: str,
        *,
        comment: Optional[str] = None,
    ) -> ApprovalRequest:
        """
        Approve or reject an open request.

        The status write is conditional on the status that was checked, so
        two concurrent resolutions cannot both succeed. On approval the
        change is applied inside the same savepoint; if that fails only the
        savepoint is rolled back and the request stays open.

        Raises:
            NotFoundError: If the request does not exist
            InvalidStateError: If the request is no longer open
            InsufficientPermission: If the principal may not resolve it
            ApplyFailedError: If the approved change could not be applied
        """
        self._require_reviewer(principal)
        request = self.get_or_404(request_id)

        machine = ApprovalStateMachine(
            request.id,
            ApprovalStatus(request.status),
            department_id=request.department_id,
        )
        from_status = machine.status
        try:
            rule = machine.resolve(principal, decision)
            if rule.to_status == ApprovalStatus.APPROVED:
                self._check_target_department(principal, request)
        except InsufficientPermission:
            logger.warning(
                "User %s (%s) may not resolve approval request %s [%s]",
                principal.id, principal.role.value, request.id, from_status.value,
            )
            raise

        # Only this savepoint is undone when the apply step fails
        try:
            with self.db.begin_nested():
                self._write_resolution(request, from_status, rule.to_status, principal)
                if rule.to_status == ApprovalStatus.APPROVED:
                    outcome = ApprovalManager(self.db, self.dispatcher).apply_request(request)
                    if not outcome.success:
                        raise ApplyFailedError(details={"error": outcome.error})
        except ApplyFailedError as e:
            self.db.expire(request)
            logger.error(
                "Approval request %s not approved, apply step failed: %s", request_id, e.details["error"]
            )
            raise

        self._record_history(request, from_status, rule.to_status, rule.action, principal.id, comment)

        logger.info(
            "Approval request %s %s by user %s", request.id, rule.to_status.value.lower(), principal.id
        )
        return request

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_approval_request(self, principal: Principal, request_id: int) -> None:
        """
        Hard-delete a request (admin only).

        Resolved requests can be deleted only while
        ``allow_resolved_deletion`` is enabled.
        """
        require_role(principal, [UserRole.ADMIN])
        request = self.get_or_404(request_id)

        if is_terminal(request.status):
            if not self.settings.allow_resolved_deletion:
                raise InvalidStateError("Resolved approval requests cannot be deleted")
            logger.warning(
                "Deleting resolved approval request %s [%s] by user %s",
                request.id, request.status, principal.id,
            )

        self.db.delete(request)
        self.db.flush()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_reviewer(self, principal: Principal) -> None:
        if not has_permission(principal, "approvals:list"):
            logger.warning("User %s (%s) denied access to approvals", principal.id, principal.role.value)
            raise InsufficientPermission()

    def _scope_filters(self, principal: Principal, request_type: Optional[str]) -> list:
        filters = []
        if request_type:
            filters.append(ApprovalRequest.request_type == request_type)
        if principal.role == UserRole.PLANNER:
            filters.append(ApprovalRequest.status == ApprovalStatus.PENDING.value)
            filters.append(
                or_(
                    ApprovalRequest.department_id.is_(None),
                    ApprovalRequest.department_id == principal.department_id,
                )
            )
        return filters

    def _write_resolution(
        self,
        request: ApprovalRequest,
        from_status: ApprovalStatus,
        to_status: ApprovalStatus,
        principal: Principal,
    ) -> None:
        """Conditional status write; loses to any resolution that got there first."""
        now = datetime.utcnow()
        result = self.db.execute(
            update(ApprovalRequest)
            .where(
                ApprovalRequest.id == request.id,
                ApprovalRequest.status == from_status.value,
            )
            .values(
                status=to_status.value,
                approver_id=principal.id,
                approved_at=now,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InvalidStateError(f"Approval request {request.id} was already resolved")
        self.db.refresh(request)

    def _check_target_department(self, principal: Principal, request: ApprovalRequest) -> None:
        """An approved change that moves a record needs create rights in the new department."""
        if request.request_type != RequestType.DATA_CHANGE.value:
            return
        data = request.new_data or {}
        target = data.get("departmentId", data.get("department_id"))
        if target is not None and target != request.department_id:
            require_create_permission(principal, target)

    @staticmethod
    def _planner_can_see(principal: Principal, request: ApprovalRequest) -> bool:
        if request.status != ApprovalStatus.PENDING.value:
            return False
        return request.department_id is None or request.department_id == principal.department_id

    def _record_history(
        self,
        request: ApprovalRequest,
        from_status: Optional[ApprovalStatus],
        to_status: ApprovalStatus,
        action: ApprovalAction,
        user_id: int,
        comment: Optional[str],
    ) -> None:
        request.history.append(ApprovalHistory(
            from_status=from_status.value if from_status else None,
            to_status=to_status.value,
            action=action.value,
            user_id=user_id,
            comment=comment,
        ))
        self.db.flush()
