"""Error taxonomy for OpsDesk.

Every error carries the HTTP status it maps to, so route handlers can let
them propagate to the application's exception handler.
"""

from typing import Any, Optional


class OpsDeskError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class UnauthenticatedError(OpsDeskError):
    status_code = 401
    default_message = "Unauthorized"


class InsufficientPermission(OpsDeskError):
    status_code = 403
    default_message = "Insufficient permissions"


class ValidationError(OpsDeskError):
    status_code = 400
    default_message = "Validation error"


class NotFoundError(OpsDeskError):
    status_code = 404
    default_message = "Not found"


class InvalidStateError(OpsDeskError):
    status_code = 400
    default_message = "Invalid state for this operation"


class UnsupportedTableError(OpsDeskError):
    status_code = 400

    def __init__(self, table_name: str, operation: str = "update"):
        super().__init__(f"Unsupported table for {operation}: {table_name}")
        self.table_name = table_name


class UnknownRequestTypeError(OpsDeskError):
    status_code = 400

    def __init__(self, request_type: str):
        super().__init__(f"Unknown request type: {request_type}")
        self.request_type = request_type


class ApplyFailedError(OpsDeskError):
    """Approval could not be materialized; the request stays pending."""

    status_code = 422
    default_message = "Failed to apply changes"


class InternalError(OpsDeskError):
    status_code = 500
