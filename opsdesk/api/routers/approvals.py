"""Approval workflow API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from opsdesk.api.deps import get_db, get_current_principal
from opsdesk.api.schemas.approvals import (
    ApprovalDetailResponse,
    ApprovalHistoryListResponse,
    ApprovalHistoryResponse,
    ApprovalListResponse,
    ApprovalRequestCreate,
    ApprovalRequestResponse,
    ApprovalResolve,
    ApprovalStats,
)
from opsdesk.api.schemas.common import Pagination, SuccessResponse
from opsdesk.core.approval import ApprovalService
from opsdesk.core.rbac import Principal, require_permission

router = APIRouter(prefix="/approvals", tags=["approvals"])


@router.get("", response_model=ApprovalListResponse)
@require_permission("approvals:list")
async def list_approvals(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    status_filter: Optional[str] = Query(None, alias="status"),
    request_type: Optional[str] = Query(None, alias="requestType"),
):
    """List approval requests visible to the current principal."""
    result = ApprovalService(db).list_approval_requests(
        principal,
        status=status_filter,
        request_type=request_type,
        page=page,
        limit=limit,
    )
    return ApprovalListResponse(
        data=[ApprovalRequestResponse.model_validate(r) for r in result.items],
        stats=ApprovalStats.model_validate(result.stats),
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
    )


@router.post("", response_model=ApprovalDetailResponse, status_code=status.HTTP_201_CREATED)
@require_permission("approvals:create")
async def create_approval(
    data: ApprovalRequestCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Submit a proposed data change or deletion for approval."""
    request = ApprovalService(db).create_approval_request(
        principal,
        request_type=data.request_type,
        table_name=data.table_name,
        record_id=data.record_id,
        old_data=data.old_data,
        new_data=data.new_data,
        reason=data.reason,
    )
    db.commit()
    db.refresh(request)
    return ApprovalDetailResponse(
        data=ApprovalRequestResponse.model_validate(request),
        message="Approval request submitted",
    )


@router.get("/{request_id}", response_model=ApprovalDetailResponse)
@require_permission("approvals:read")
async def get_approval(
    request_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get an approval request by ID."""
    request = ApprovalService(db).get_visible_request(principal, request_id)
    return ApprovalDetailResponse(data=ApprovalRequestResponse.model_validate(request))


@router.get("/{request_id}/history", response_model=ApprovalHistoryListResponse)
@require_permission("approvals:read")
async def get_approval_history(
    request_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get the lifecycle history of an approval request."""
    history = ApprovalService(db).get_history(principal, request_id)
    return ApprovalHistoryListResponse(
        data=[ApprovalHistoryResponse.model_validate(h) for h in history]
    )


@router.put("/{request_id}", response_model=ApprovalDetailResponse)
@require_permission("approvals:resolve")
async def resolve_approval(
    request_id: int,
    data: ApprovalResolve,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Approve or reject a pending request. Approval applies the change."""
    request = ApprovalService(db).resolve_approval_request(
        principal, request_id, data.status, comment=data.comment
    )
    db.commit()
    db.refresh(request)
    verb = "approved" if data.status == "APPROVED" else "rejected"
    return ApprovalDetailResponse(
        data=ApprovalRequestResponse.model_validate(request),
        message=f"Request {verb}",
    )


@router.delete("/{request_id}", response_model=SuccessResponse)
@require_permission("approvals:delete")
async def delete_approval(
    request_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete an approval request (admin only)."""
    ApprovalService(db).delete_approval_request(principal, request_id)
    db.commit()
    return SuccessResponse(message="Approval request deleted successfully")
