"""Data-management endpoints.

Edits and deletions of operational records. Depending on the caller's role
the mutation is applied directly or filed as an approval request.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from opsdesk.api.deps import get_db, get_current_principal
from opsdesk.core.approval import MutationResult, MutationService, RequestType
from opsdesk.core.rbac import Principal, require_permission

router = APIRouter(prefix="/manage-data", tags=["manage-data"])


def _to_response(result: MutationResult) -> Dict[str, Any]:
    if result.applied:
        return {"success": True, "applied": True, "data": result.record}
    return {
        "success": True,
        "applied": False,
        "approvalRequestId": result.approval_request.id,
        "status": result.approval_request.status,
        "message": "Change submitted for approval",
    }


@router.put("/{table_name}/{record_id}")
@require_permission("data:update")
async def update_record(
    table_name: str,
    record_id: int,
    data: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Update a record, or submit the update for approval."""
    result = MutationService(db).submit_mutation(
        principal,
        request_type=RequestType.DATA_CHANGE.value,
        table_name=table_name,
        record_id=record_id,
        new_data=data,
        reason=data.get("_reason"),
    )
    db.commit()
    return _to_response(result)


@router.delete("/{table_name}/{record_id}")
@require_permission("data:delete")
async def delete_record(
    table_name: str,
    record_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a record, or submit the deletion for approval."""
    result = MutationService(db).submit_mutation(
        principal,
        request_type=RequestType.DATA_DELETION.value,
        table_name=table_name,
        record_id=record_id,
    )
    db.commit()
    return _to_response(result)
