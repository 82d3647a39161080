"""Approval workflow database models.

Stores proposed data mutations and their lifecycle history.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey, Text
from sqlalchemy.orm import relationship

from opsdesk.db.base import Base


class ApprovalRequest(Base):
    """
    One proposed mutation against a target table.

    ``new_data``/``old_data`` are stored as JSON because their shape depends
    on ``table_name``.
    """
    __tablename__ = "approval_requests"

    id = Column(Integer, primary_key=True)

    # Principals come from the auth provider, so no foreign keys here
    requester_id = Column(Integer, nullable=False, index=True)
    approver_id = Column(Integer, nullable=True)

    status = Column(String(32), nullable=False, default="PENDING", index=True)

    # What to apply, and where
    request_type = Column(String(64), nullable=False, index=True)
    table_name = Column(String(64), nullable=False)
    record_id = Column(Integer, nullable=True)
    department_id = Column(Integer, nullable=True, index=True)

    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=False)
    reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    approved_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    history = relationship(
        "ApprovalHistory",
        back_populates="request",
        order_by="ApprovalHistory.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<ApprovalRequest {self.id} {self.request_type} {self.table_name}#{self.record_id} [{self.status}]>"


class ApprovalHistory(Base):
    """
    Records every lifecycle event of an approval request.
    """
    __tablename__ = "approval_history"

    id = Column(Integer, primary_key=True)
    request_id = Column(Integer, ForeignKey("approval_requests.id", ondelete="CASCADE"), nullable=False, index=True)

    from_status = Column(String(32), nullable=True)  # None for the submit event
    to_status = Column(String(32), nullable=False)
    action = Column(String(32), nullable=False)

    user_id = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    request = relationship("ApprovalRequest", back_populates="history")

    def __repr__(self) -> str:
        return f"<ApprovalHistory {self.from_status} -> {self.to_status}>"
