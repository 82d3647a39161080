"""Approval manager: materializes approved requests onto their target rows."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from opsdesk.core.errors import OpsDeskError, UnknownRequestTypeError, ValidationError
from opsdesk.core.logger import get_logger

from .dispatcher import TableDispatcher, default_dispatcher
from .states import RequestType

logger = get_logger(__name__)


@dataclass
class ApplyResult:
    """Outcome of an apply attempt. Failures are returned, not raised."""

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


class ApprovalManager:
    """
    Applies the payload of an approved request to the real record.

    Exactly one write to the target table per successful call; validation
    and lookup happen before anything is written, so a failed call leaves
    the table untouched.
    """

    def __init__(self, db: Session, dispatcher: Optional[TableDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher or default_dispatcher

    def apply_approved_changes(
        self,
        *,
        table_name: str,
        request_type: str,
        new_data: Optional[Dict[str, Any]] = None,
        record_id: Optional[int] = None,
    ) -> ApplyResult:
        """
        Apply a ``data_change`` or ``data_deletion`` to ``table_name``.

        Returns:
            ApplyResult with a snapshot of the written record, or the error
        """
        try:
            data = self._dispatch(table_name, request_type, new_data or {}, record_id)
        except OpsDeskError as e:
            logger.error(
                "Failed to apply %s on %s#%s: %s", request_type, table_name, record_id, e.message
            )
            return ApplyResult(success=False, error=e.message)
        except SQLAlchemyError:
            logger.exception("Database error applying %s on %s#%s", request_type, table_name, record_id)
            return ApplyResult(success=False, error=f"Failed to apply changes to {table_name}")

        logger.info("Applied %s on %s#%s", request_type, table_name, record_id)
        return ApplyResult(success=True, data=data)

    def apply_request(self, request) -> ApplyResult:
        """Apply an ``ApprovalRequest`` row."""
        return self.apply_approved_changes(
            table_name=request.table_name,
            request_type=request.request_type,
            new_data=request.new_data,
            record_id=request.record_id,
        )

    def _dispatch(self, table_name, request_type, new_data, record_id) -> Dict[str, Any]:
        try:
            request_type = RequestType(request_type)
        except ValueError:
            raise UnknownRequestTypeError(str(request_type))

        if request_type == RequestType.DATA_CHANGE:
            if record_id is None:
                raise ValidationError("Record ID required for data change")
            handler = self.dispatcher.get_handler(table_name, "update")
            record = handler.update(self.db, record_id, new_data)
        else:
            if record_id is None:
                raise ValidationError("Record ID required for data deletion")
            handler = self.dispatcher.get_handler(table_name, "deletion")
            record = handler.delete(self.db, record_id)

        return handler.snapshot(record)
