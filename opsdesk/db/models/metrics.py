"""Monthly bureau-level metrics (not department-scoped)."""

from datetime import datetime
from sqlalchemy import Column, Integer, Float, DateTime, UniqueConstraint

from opsdesk.db.base import Base


class SafetyIncident(Base):
    __tablename__ = "safety_incidents"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_safety_incidents_period"),)

    id = Column(Integer, primary_key=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    nearmiss = Column(Integer, default=0)
    kec_alat = Column(Integer, default=0)
    kec_kecil = Column(Integer, default=0)
    kec_ringan = Column(Integer, default=0)
    kec_berat = Column(Integer, default=0)
    fatality = Column(Integer, default=0)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class EnergyConsumption(Base):
    __tablename__ = "energy_consumption"
    __table_args__ = (UniqueConstraint("year", "month", name="uq_energy_consumption_period"),)

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    tambang_consumption = Column(Float, default=0)
    pabrik_consumption = Column(Float, default=0)
    supporting_consumption = Column(Float, default=0)
    created_by_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
