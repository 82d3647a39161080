"""Partial-update payloads, one per dispatchable table.

Payloads arrive in camelCase (``totalWorking``) or snake_case; unknown
fields are rejected so a typo never silently becomes a no-op.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PartialUpdate(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class OperationalReportUpdate(PartialUpdate):
    report_date: Optional[date] = None
    equipment_id: Optional[int] = None
    department_id: Optional[int] = None
    total_working: Optional[float] = Field(None, ge=0, le=24)
    total_standby: Optional[float] = Field(None, ge=0, le=24)
    total_breakdown: Optional[float] = Field(None, ge=0, le=24)
    shift_type: Optional[str] = None
    notes: Optional[str] = None
    is_complete: Optional[bool] = None


class KtaKpiDataUpdate(PartialUpdate):
    no_register: Optional[str] = None
    npp_pelapor: Optional[str] = None
    nama_pelapor: Optional[str] = None
    tanggal: Optional[date] = None
    lokasi: Optional[str] = None
    area_temuan: Optional[str] = None
    keterangan: Optional[str] = None
    kategori: Optional[str] = None
    pic_departemen: Optional[str] = None
    status_tindak_lanjut: Optional[Literal["OPEN", "CLOSE"]] = None
    due_date: Optional[date] = None
    tindak_lanjut_langsung: Optional[str] = None


class NotificationUpdate(PartialUpdate):
    department_id: Optional[int] = None
    report_time: Optional[str] = Field(None, pattern=r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
    urgency: Optional[Literal["NORMAL", "URGENT", "EMERGENCY"]] = None
    problem_detail: Optional[str] = Field(None, min_length=10, max_length=1000)
    status: Optional[Literal["PROCESS", "COMPLETE"]] = None


class OrderUpdate(PartialUpdate):
    job_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None


class MaintenanceRoutineUpdate(PartialUpdate):
    job_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    department_id: Optional[int] = None


class CriticalIssueUpdate(PartialUpdate):
    issue_name: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    department_id: Optional[int] = None


class SafetyIncidentUpdate(PartialUpdate):
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2020, le=2030)
    nearmiss: Optional[int] = Field(None, ge=0)
    kec_alat: Optional[int] = Field(None, ge=0)
    kec_kecil: Optional[int] = Field(None, ge=0)
    kec_ringan: Optional[int] = Field(None, ge=0)
    kec_berat: Optional[int] = Field(None, ge=0)
    fatality: Optional[int] = Field(None, ge=0)


class EnergyConsumptionUpdate(PartialUpdate):
    year: Optional[int] = Field(None, ge=2020, le=2030)
    month: Optional[int] = Field(None, ge=1, le=12)
    tambang_consumption: Optional[float] = Field(None, ge=0)
    pabrik_consumption: Optional[float] = Field(None, ge=0)
    supporting_consumption: Optional[float] = Field(None, ge=0)
