"""Initial schema: departments and operational data tables

Revision ID: 0001
Revises: None
Create Date: 2026-09-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    """Create departments and the tables approval requests target."""

    # --- departments (no FK deps) ---
    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_departments"),
        sa.UniqueConstraint("name", name="uq_departments_name"),
        sa.UniqueConstraint("code", name="uq_departments_code"),
    )

    # --- operational_reports ---
    op.create_table(
        "operational_reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column("equipment_id", sa.Integer(), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("total_working", sa.Float(), server_default="0"),
        sa.Column("total_standby", sa.Float(), server_default="0"),
        sa.Column("total_breakdown", sa.Float(), server_default="0"),
        sa.Column("shift_type", sa.String(32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_complete", sa.Boolean(), server_default="false"),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_operational_reports"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], name="fk_operational_reports_department_id"),
    )
    op.create_index("ix_operational_reports_report_date", "operational_reports", ["report_date"])
    op.create_index("ix_operational_reports_equipment_id", "operational_reports", ["equipment_id"])
    op.create_index("ix_operational_reports_department_id", "operational_reports", ["department_id"])

    # --- kta_kpi_data ---
    op.create_table(
        "kta_kpi_data",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("no_register", sa.String(64), nullable=True),
        sa.Column("npp_pelapor", sa.String(64), nullable=False),
        sa.Column("nama_pelapor", sa.String(255), nullable=False),
        sa.Column("tanggal", sa.Date(), nullable=False),
        sa.Column("lokasi", sa.String(255), nullable=True),
        sa.Column("area_temuan", sa.String(255), nullable=True),
        sa.Column("keterangan", sa.Text(), nullable=True),
        sa.Column("kategori", sa.String(64), nullable=True),
        sa.Column("pic_departemen", sa.String(100), nullable=False),
        sa.Column("status_tindak_lanjut", sa.String(16), server_default="OPEN"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("tindak_lanjut_langsung", sa.Text(), nullable=True),
        sa.Column("department_id", sa.Integer(), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_kta_kpi_data"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], name="fk_kta_kpi_data_department_id"),
    )
    op.create_index("ix_kta_kpi_data_department_id", "kta_kpi_data", ["department_id"])

    # --- notifications ---
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("unique_number", sa.String(64), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("report_time", sa.String(5), nullable=False),
        sa.Column("urgency", sa.String(16), nullable=False, server_default="NORMAL"),
        sa.Column("problem_detail", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="PROCESS"),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
        sa.UniqueConstraint("unique_number", name="uq_notifications_unique_number"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], name="fk_notifications_department_id"),
    )
    op.create_index("ix_notifications_department_id", "notifications", ["department_id"])

    # --- orders (FK -> notifications) ---
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("notification_id", sa.Integer(), nullable=False),
        sa.Column("job_name", sa.String(255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
        sa.ForeignKeyConstraint(["notification_id"], ["notifications.id"], name="fk_orders_notification_id", ondelete="CASCADE"),
    )
    op.create_index("ix_orders_notification_id", "orders", ["notification_id"])

    # --- maintenance_routine ---
    op.create_table(
        "maintenance_routine",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("unique_number", sa.String(64), nullable=False),
        sa.Column("job_name", sa.String(255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_maintenance_routine"),
        sa.UniqueConstraint("unique_number", name="uq_maintenance_routine_unique_number"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], name="fk_maintenance_routine_department_id"),
    )
    op.create_index("ix_maintenance_routine_department_id", "maintenance_routine", ["department_id"])

    # --- critical_issues ---
    op.create_table(
        "critical_issues",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("issue_name", sa.String(255), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="INVESTIGASI"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_critical_issues"),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], name="fk_critical_issues_department_id"),
    )
    op.create_index("ix_critical_issues_department_id", "critical_issues", ["department_id"])

    # --- safety_incidents (bureau-wide, one row per month) ---
    op.create_table(
        "safety_incidents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("nearmiss", sa.Integer(), server_default="0"),
        sa.Column("kec_alat", sa.Integer(), server_default="0"),
        sa.Column("kec_kecil", sa.Integer(), server_default="0"),
        sa.Column("kec_ringan", sa.Integer(), server_default="0"),
        sa.Column("kec_berat", sa.Integer(), server_default="0"),
        sa.Column("fatality", sa.Integer(), server_default="0"),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_safety_incidents"),
        sa.UniqueConstraint("year", "month", name="uq_safety_incidents_period"),
    )

    # --- energy_consumption (bureau-wide, one row per month) ---
    op.create_table(
        "energy_consumption",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("tambang_consumption", sa.Float(), server_default="0"),
        sa.Column("pabrik_consumption", sa.Float(), server_default="0"),
        sa.Column("supporting_consumption", sa.Float(), server_default="0"),
        sa.Column("created_by_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_energy_consumption"),
        sa.UniqueConstraint("year", "month", name="uq_energy_consumption_period"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("energy_consumption")
    op.drop_table("safety_incidents")
    op.drop_table("critical_issues")
    op.drop_table("maintenance_routine")
    op.drop_table("orders")
    op.drop_table("notifications")
    op.drop_table("kta_kpi_data")
    op.drop_table("operational_reports")
    op.drop_table("departments")
