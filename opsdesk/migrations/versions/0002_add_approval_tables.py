"""Add approval workflow tables

Revision ID: 0002
Revises: 0001
Create Date: 2026-09-21

Tables added:
- approval_requests: Proposed data changes and deletions
- approval_history: Lifecycle audit trail
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create approval tables."""

    # --- approval_requests ---
    op.create_table(
        "approval_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("requester_id", sa.Integer(), nullable=False),
        sa.Column("approver_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="PENDING"),
        sa.Column("request_type", sa.String(64), nullable=False),
        sa.Column("table_name", sa.String(64), nullable=False),
        sa.Column("record_id", sa.Integer(), nullable=True),
        sa.Column("department_id", sa.Integer(), nullable=True),
        sa.Column("old_data", sa.JSON(), nullable=True),
        sa.Column("new_data", sa.JSON(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()")),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_approval_requests"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'PENDING_ADMIN_APPROVAL', 'APPROVED', 'REJECTED')",
            name="ck_approval_requests_status",
        ),
    )
    op.create_index("ix_approval_requests_requester_id", "approval_requests", ["requester_id"])
    op.create_index("ix_approval_requests_status", "approval_requests", ["status"])
    op.create_index("ix_approval_requests_request_type", "approval_requests", ["request_type"])
    op.create_index("ix_approval_requests_department_id", "approval_requests", ["department_id"])
    op.create_index("ix_approval_requests_created_at", "approval_requests", ["created_at"])

    # --- approval_history (FK -> approval_requests) ---
    op.create_table(
        "approval_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("request_id", sa.Integer(), nullable=False),
        sa.Column("from_status", sa.String(32), nullable=True),
        sa.Column("to_status", sa.String(32), nullable=False),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_approval_history"),
        sa.ForeignKeyConstraint(["request_id"], ["approval_requests.id"], name="fk_approval_history_request_id", ondelete="CASCADE"),
    )
    op.create_index("ix_approval_history_request_id", "approval_history", ["request_id"])
    op.create_index("ix_approval_history_created_at", "approval_history", ["created_at"])


def downgrade() -> None:
    """Drop approval tables."""
    op.drop_table("approval_history")
    op.drop_table("approval_requests")
