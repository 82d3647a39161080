"""Table dispatcher.

Maps a logical table name to the handler that updates or deletes its rows.
Tables are added by registering a ``TableHandler``; dispatch code never
changes.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

import pydantic
from pydantic.alias_generators import to_camel
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from opsdesk.core.errors import NotFoundError, UnsupportedTableError, ValidationError
from opsdesk.db.models import (
    CriticalIssue,
    EnergyConsumption,
    KtaKpiData,
    MaintenanceRoutine,
    Notification,
    OperationalReport,
    Order,
    SafetyIncident,
)

from . import payloads

# Bookkeeping columns never copied into snapshots
_SNAPSHOT_EXCLUDE = {"id", "created_at", "updated_at"}


def strip_metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop routing metadata keys (``_departmentId`` and friends)."""
    return {k: v for k, v in data.items() if not k.startswith("_")}


def _jsonable(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class TableHandler:
    """Update/delete by primary key for one table."""

    table_name: str
    model: type
    update_schema: type
    department_scoped: bool = True

    def get(self, db: Session, record_id: int):
        return db.get(self.model, record_id)

    def get_or_404(self, db: Session, record_id: int):
        record = self.get(db, record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found in {self.table_name}")
        return record

    def validate(self, new_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a partial update and return it keyed by column name.

        Raises:
            ValidationError: With field-level details
        """
        try:
            parsed = self.update_schema.model_validate(strip_metadata(new_data))
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid data for {self.table_name}",
                details=[
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in e.errors()
                ],
            )
        values = parsed.model_dump(exclude_unset=True)
        if not values:
            raise ValidationError(f"No fields to update in {self.table_name}")

        columns = inspect(self.model).columns
        missing = [
            key for key, value in values.items()
            if value is None and key in columns and not columns[key].nullable
        ]
        if missing:
            raise ValidationError(
                f"Invalid data for {self.table_name}",
                details=[{"field": to_camel(key), "message": "Field cannot be null"} for key in missing],
            )
        return values

    def update(self, db: Session, record_id: int, new_data: Dict[str, Any]):
        values = self.validate(new_data)
        record = self.get_or_404(db, record_id)
        try:
            with db.begin_nested():
                for key, value in values.items():
                    setattr(record, key, value)
        except IntegrityError:
            raise ValidationError(
                f"Change conflicts with existing data in {self.table_name}",
                details=[
                    {"field": to_camel(key), "message": "Violates a uniqueness or reference constraint"}
                    for key in values
                ],
            )
        return record

    def delete(self, db: Session, record_id: int):
        record = self.get_or_404(db, record_id)
        db.delete(record)
        db.flush()
        return record

    def department_of(self, record) -> Optional[int]:
        if not self.department_scoped:
            return None
        return getattr(record, "department_id", None)

    def creator_of(self, record) -> Optional[int]:
        return getattr(record, "created_by_id", None)

    def snapshot(self, record, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Camel-cased column values of ``record``, optionally limited to ``fields``."""
        columns = [c.key for c in inspect(self.model).column_attrs]
        if fields is not None:
            wanted = set(fields)
            columns = [c for c in columns if c in wanted]
        return {
            to_camel(name): _jsonable(getattr(record, name))
            for name in columns
            if name not in _SNAPSHOT_EXCLUDE
        }


class TableDispatcher:
    """Registry of table handlers keyed by logical table name."""

    def __init__(self, handlers: Iterable[TableHandler] = ()):
        self._handlers: Dict[str, TableHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: TableHandler) -> None:
        if handler.table_name in self._handlers:
            raise ValueError(f"Table already registered: {handler.table_name}")
        self._handlers[handler.table_name] = handler

    def supports(self, table_name: str) -> bool:
        return table_name in self._handlers

    def tables(self) -> list[str]:
        return sorted(self._handlers)

    def get_handler(self, table_name: str, operation: str = "update") -> TableHandler:
        handler = self._handlers.get(table_name)
        if handler is None:
            raise UnsupportedTableError(table_name, operation)
        return handler

    def update(self, db: Session, table_name: str, record_id: int, new_data: Dict[str, Any]):
        return self.get_handler(table_name, "update").update(db, record_id, new_data)

    def delete(self, db: Session, table_name: str, record_id: int):
        return self.get_handler(table_name, "deletion").delete(db, record_id)


def build_default_dispatcher() -> TableDispatcher:
    return TableDispatcher([
        TableHandler("operational_reports", OperationalReport, payloads.OperationalReportUpdate),
        TableHandler("kta_kpi_data", KtaKpiData, payloads.KtaKpiDataUpdate),
        TableHandler("notifications", Notification, payloads.NotificationUpdate),
        TableHandler("orders", Order, payloads.OrderUpdate),
        TableHandler("maintenance_routine", MaintenanceRoutine, payloads.MaintenanceRoutineUpdate),
        TableHandler("critical_issues", CriticalIssue, payloads.CriticalIssueUpdate),
        TableHandler("safety_incidents", SafetyIncident, payloads.SafetyIncidentUpdate, department_scoped=False),
        TableHandler("energy_consumption", EnergyConsumption, payloads.EnergyConsumptionUpdate, department_scoped=False),
    ])


default_dispatcher = build_default_dispatcher()
