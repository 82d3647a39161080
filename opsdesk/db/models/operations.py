"""Operational records that approval requests can change or delete."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date, Float, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship

from opsdesk.db.base import Base


class OperationalReport(Base):
    __tablename__ = "operational_reports"

    id = Column(Integer, primary_key=True)
    report_date = Column(Date, nullable=False, index=True)
    equipment_id = Column(Integer, nullable=False, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    total_working = Column(Float, default=0)
    total_standby = Column(Float, default=0)
    total_breakdown = Column(Float, default=0)
    shift_type = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    is_complete = Column(Boolean, default=False)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class KtaKpiData(Base):
    """KTA/TTA safety findings (unsafe conditions and unsafe acts)."""
    __tablename__ = "kta_kpi_data"

    id = Column(Integer, primary_key=True)
    no_register = Column(String(64), nullable=True)
    npp_pelapor = Column(String(64), nullable=False)
    nama_pelapor = Column(String(255), nullable=False)
    tanggal = Column(Date, nullable=False)
    lokasi = Column(String(255), nullable=True)
    area_temuan = Column(String(255), nullable=True)
    keterangan = Column(Text, nullable=True)
    kategori = Column(String(64), nullable=True)
    pic_departemen = Column(String(100), nullable=False)
    status_tindak_lanjut = Column(String(16), default="OPEN")
    due_date = Column(Date, nullable=True)
    tindak_lanjut_langsung = Column(Text, nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Notification(Base):
    """Maintenance notification raised by a department."""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    unique_number = Column(String(64), unique=True, nullable=False)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    report_time = Column(String(5), nullable=False)  # HH:MM
    urgency = Column(String(16), nullable=False, default="NORMAL")
    problem_detail = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="PROCESS")
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    orders = relationship("Order", back_populates="notification", cascade="all, delete-orphan")


class Order(Base):
    """Maintenance order raised against a notification."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    notification_id = Column(Integer, ForeignKey("notifications.id", ondelete="CASCADE"), nullable=False, index=True)
    job_name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    notification = relationship("Notification", back_populates="orders")

    @property
    def department_id(self):
        # Orders belong to the department of their notification
        return self.notification.department_id if self.notification else None


class MaintenanceRoutine(Base):
    __tablename__ = "maintenance_routine"

    id = Column(Integer, primary_key=True)
    unique_number = Column(String(64), unique=True, nullable=False)
    job_name = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CriticalIssue(Base):
    __tablename__ = "critical_issues"

    id = Column(Integer, primary_key=True)
    issue_name = Column(String(255), nullable=False)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    status = Column(String(32), nullable=False, default="INVESTIGASI")
    description = Column(Text, nullable=True)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
