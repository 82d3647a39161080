"""Database models for OpsDesk."""

from opsdesk.db.models.department import Department
from opsdesk.db.models.approval import ApprovalRequest, ApprovalHistory
from opsdesk.db.models.operations import (
    OperationalReport,
    KtaKpiData,
    Notification,
    Order,
    MaintenanceRoutine,
    CriticalIssue,
)
from opsdesk.db.models.metrics import SafetyIncident, EnergyConsumption

__all__ = [
    "Department",
    "ApprovalRequest",
    "ApprovalHistory",
    "OperationalReport",
    "KtaKpiData",
    "Notification",
    "Order",
    "MaintenanceRoutine",
    "CriticalIssue",
    "SafetyIncident",
    "EnergyConsumption",
]
