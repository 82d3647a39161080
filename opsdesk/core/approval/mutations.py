"""Mutation entry point for the data-management screens.

Every update or delete of operational data goes through
``MutationService.submit_mutation``: it either writes the change straight
away or files an approval request, depending on the requester's role.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from opsdesk.core.logger import get_logger
from opsdesk.core.rbac import (
    Principal,
    require_create_permission,
    require_delete_permission,
    require_department_access,
    require_modify_permission,
)
from opsdesk.db.models import ApprovalRequest

from .dispatcher import TableDispatcher, default_dispatcher
from .router import MutationPath, decide_path
from .service import ApprovalService
from .states import RequestType

logger = get_logger(__name__)


@dataclass
class MutationResult:
    """Either the written record (``applied``) or the request filed for it."""

    applied: bool
    record: Optional[Dict[str, Any]] = None
    approval_request: Optional[ApprovalRequest] = None


class MutationService:
    def __init__(self, db: Session, dispatcher: Optional[TableDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher or default_dispatcher
        self.approvals = ApprovalService(db, self.dispatcher)

    def submit_mutation(
        self,
        principal: Principal,
        *,
        request_type: str,
        table_name: str,
        record_id: int,
        new_data: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
    ) -> MutationResult:
        """
        Apply or queue a change/deletion of one record.

        Raises:
            InsufficientPermission: Read-only role, foreign department, or
                missing modify/delete rights
            UnsupportedTableError: If the table is not registered
            UnknownRequestTypeError: If the request type is not known
            NotFoundError: If the record does not exist
            ValidationError: If the change payload is invalid
        """
        operation = "deletion" if request_type == RequestType.DATA_DELETION.value else "update"
        handler = self.dispatcher.get_handler(table_name, operation)
        path = decide_path(principal.role, request_type, department_scoped=handler.department_scoped)
        request_type = RequestType(request_type)

        record = handler.get_or_404(self.db, record_id)
        department_id = handler.department_of(record)
        if handler.department_scoped:
            require_department_access(principal, department_id)

        if path == MutationPath.IMMEDIATE:
            return self._apply_now(principal, handler, request_type, record, record_id, new_data)

        if request_type == RequestType.DATA_CHANGE:
            values = handler.validate(new_data or {})
            old_data = handler.snapshot(record, fields=values.keys())
        else:
            old_data = handler.snapshot(record)

        request = self.approvals.create_approval_request(
            principal,
            request_type=request_type.value,
            table_name=table_name,
            record_id=record_id,
            new_data=new_data or {},
            old_data=old_data,
            reason=reason,
            department_id=department_id,
        )
        return MutationResult(applied=False, approval_request=request)

    def _apply_now(self, principal, handler, request_type, record, record_id, new_data) -> MutationResult:
        if request_type == RequestType.DATA_CHANGE:
            require_modify_permission(principal, handler.department_of(record), handler.creator_of(record))
            values = handler.validate(new_data or {})
            # Moving a record needs create rights in the target department
            if "department_id" in values:
                require_create_permission(principal, values["department_id"])
            written = handler.update(self.db, record_id, new_data or {})
        else:
            require_delete_permission(principal)
            written = handler.delete(self.db, record_id)

        logger.info(
            "User %s applied %s on %s#%s directly",
            principal.id, request_type.value, handler.table_name, record_id,
        )
        return MutationResult(applied=True, record=handler.snapshot(written))
