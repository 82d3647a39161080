from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from .common import CamelModel, Pagination


class ApprovalRequestCreate(CamelModel):
    request_type: str = Field(..., min_length=1)
    table_name: str = Field(..., min_length=1)
    record_id: Optional[int] = Field(None, gt=0)
    old_data: Optional[Dict[str, Any]] = None
    new_data: Dict[str, Any]
    reason: Optional[str] = None


class ApprovalResolve(CamelModel):
    status: Literal["APPROVED", "REJECTED"]
    comment: Optional[str] = None


class ApprovalRequestResponse(CamelModel):
    id: int
    requester_id: int
    approver_id: Optional[int]
    status: str
    request_type: str
    table_name: str
    record_id: Optional[int]
    department_id: Optional[int]
    old_data: Optional[Dict[str, Any]]
    new_data: Dict[str, Any]
    reason: Optional[str]
    created_at: datetime
    approved_at: Optional[datetime]
    updated_at: Optional[datetime]


class ApprovalHistoryResponse(CamelModel):
    id: int
    from_status: Optional[str]
    to_status: str
    action: str
    user_id: Optional[int]
    comment: Optional[str]
    created_at: datetime


class ApprovalStats(CamelModel):
    total: int = 0
    pending: int = 0
    pending_admin_approval: int = 0
    approved: int = 0
    rejected: int = 0


class ApprovalListResponse(CamelModel):
    success: bool = True
    data: List[ApprovalRequestResponse]
    stats: ApprovalStats
    pagination: Pagination


class ApprovalDetailResponse(CamelModel):
    success: bool = True
    data: ApprovalRequestResponse
    message: Optional[str] = None


class ApprovalHistoryListResponse(CamelModel):
    success: bool = True
    data: List[ApprovalHistoryResponse]
