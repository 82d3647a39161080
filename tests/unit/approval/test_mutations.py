"""Tests for the mutation entry point."""

import pytest

from opsdesk.core.approval.mutations import MutationService
from opsdesk.core.errors import (
    InsufficientPermission,
    NotFoundError,
    UnknownRequestTypeError,
    UnsupportedTableError,
    ValidationError,
)
from opsdesk.db.models import CriticalIssue, EnergyConsumption, SafetyIncident

from tests.factories import (
    create_critical_issue,
    create_energy_consumption,
    create_safety_incident,
)


@pytest.fixture
def mutations(db_session):
    return MutationService(db_session)


class TestImmediateMutations:
    """Admins and planners write directly where allowed."""

    def test_admin_change_applied(self, db_session, mutations, admin, department):
        issue = create_critical_issue(db_session, department=department)
        result = mutations.submit_mutation(
            admin, request_type="data_change", table_name="critical_issues",
            record_id=issue.id, new_data={"status": "SELESAI"},
        )
        assert result.applied
        assert result.approval_request is None
        assert result.record["status"] == "SELESAI"
        assert db_session.get(CriticalIssue, issue.id).status == "SELESAI"

    def test_admin_deletion_applied(self, db_session, mutations, admin):
        incident = create_safety_incident(db_session, month=7)
        result = mutations.submit_mutation(
            admin, request_type="data_deletion", table_name="safety_incidents", record_id=incident.id,
        )
        assert result.applied
        assert db_session.get(SafetyIncident, incident.id) is None

    def test_planner_change_in_own_department(self, db_session, mutations, planner, department):
        issue = create_critical_issue(db_session, department=department)
        result = mutations.submit_mutation(
            planner, request_type="data_change", table_name="critical_issues",
            record_id=issue.id, new_data={"description": "Belt replaced"},
        )
        assert result.applied
        assert db_session.get(CriticalIssue, issue.id).description == "Belt replaced"

    def test_planner_blocked_in_other_department(self, db_session, mutations, planner, other_department):
        issue = create_critical_issue(db_session, department=other_department)
        with pytest.raises(InsufficientPermission, match="Access denied to this department"):
            mutations.submit_mutation(
                planner, request_type="data_change", table_name="critical_issues",
                record_id=issue.id, new_data={"status": "SELESAI"},
            )
        assert db_session.get(CriticalIssue, issue.id).status == "INVESTIGASI"

    def test_planner_cannot_move_record_to_other_department(
        self, db_session, mutations, planner, department, other_department
    ):
        issue = create_critical_issue(db_session, department=department)
        with pytest.raises(InsufficientPermission, match="No permission to create in this department"):
            mutations.submit_mutation(
                planner, request_type="data_change", table_name="critical_issues",
                record_id=issue.id, new_data={"departmentId": other_department.id},
            )
        assert db_session.get(CriticalIssue, issue.id).department_id == department.id

    def test_admin_moves_record_between_departments(
        self, db_session, mutations, admin, department, other_department
    ):
        issue = create_critical_issue(db_session, department=department)
        result = mutations.submit_mutation(
            admin, request_type="data_change", table_name="critical_issues",
            record_id=issue.id, new_data={"departmentId": other_department.id},
        )
        assert result.record["departmentId"] == other_department.id

    def test_null_for_required_column_rejected(self, db_session, mutations, admin, department):
        issue = create_critical_issue(db_session, department=department)
        with pytest.raises(ValidationError) as exc_info:
            mutations.submit_mutation(
                admin, request_type="data_change", table_name="critical_issues",
                record_id=issue.id, new_data={"status": None},
            )
        assert exc_info.value.details == [{"field": "status", "message": "Field cannot be null"}]
        assert db_session.get(CriticalIssue, issue.id).status == "INVESTIGASI"

    def test_period_clash_rejected(self, db_session, mutations, admin):
        create_energy_consumption(db_session, month=1)
        reading = create_energy_consumption(db_session, month=2)
        with pytest.raises(ValidationError, match="Change conflicts with existing data"):
            mutations.submit_mutation(
                admin, request_type="data_change", table_name="energy_consumption",
                record_id=reading.id, new_data={"month": 1},
            )
        db_session.refresh(reading)
        assert reading.month == 2


class TestQueuedMutations:
    """Mutations that become approval requests."""

    def test_inputter_change_queued_with_old_values(self, db_session, mutations, inputter, department):
        issue = create_critical_issue(db_session, department=department)
        result = mutations.submit_mutation(
            inputter, request_type="data_change", table_name="critical_issues",
            record_id=issue.id, new_data={"status": "PROSES"}, reason="Investigation started",
        )
        request = result.approval_request
        assert not result.applied
        assert request.status == "PENDING"
        assert request.department_id == department.id
        assert request.old_data == {"status": "INVESTIGASI"}
        assert request.new_data == {"status": "PROSES"}
        assert request.reason == "Investigation started"
        assert db_session.get(CriticalIssue, issue.id).status == "INVESTIGASI"

    def test_inputter_invalid_change_rejected_up_front(self, db_session, mutations, inputter, department):
        issue = create_critical_issue(db_session, department=department)
        with pytest.raises(ValidationError):
            mutations.submit_mutation(
                inputter, request_type="data_change", table_name="critical_issues",
                record_id=issue.id, new_data={"priority": "HIGH"},
            )

    def test_planner_deletion_needs_admin(self, db_session, mutations, planner, department):
        issue = create_critical_issue(db_session, department=department)
        result = mutations.submit_mutation(
            planner, request_type="data_deletion", table_name="critical_issues", record_id=issue.id,
        )
        assert not result.applied
        assert result.approval_request.status == "PENDING_ADMIN_APPROVAL"
        assert result.approval_request.old_data["issueName"] == issue.issue_name
        assert db_session.get(CriticalIssue, issue.id) is not None

    def test_planner_change_to_bureau_table_needs_admin(self, db_session, mutations, planner):
        energy = create_energy_consumption(db_session, month=8)
        result = mutations.submit_mutation(
            planner, request_type="data_change", table_name="energy_consumption",
            record_id=energy.id, new_data={"tambangConsumption": 1500},
        )
        assert not result.applied
        assert result.approval_request.status == "PENDING_ADMIN_APPROVAL"
        assert result.approval_request.department_id is None
        assert db_session.get(EnergyConsumption, energy.id).tambang_consumption == 1200.0


class TestRejectedMutations:
    """Input errors."""

    def test_viewer_cannot_mutate(self, db_session, mutations, viewer, department):
        issue = create_critical_issue(db_session, department=department)
        with pytest.raises(InsufficientPermission):
            mutations.submit_mutation(
                viewer, request_type="data_change", table_name="critical_issues",
                record_id=issue.id, new_data={"status": "SELESAI"},
            )

    def test_unsupported_table(self, mutations, admin):
        with pytest.raises(UnsupportedTableError):
            mutations.submit_mutation(
                admin, request_type="data_deletion", table_name="users", record_id=1,
            )

    def test_unknown_request_type(self, mutations, admin):
        with pytest.raises(UnknownRequestTypeError):
            mutations.submit_mutation(
                admin, request_type="data_merge", table_name="critical_issues", record_id=1,
            )

    def test_missing_record(self, mutations, inputter):
        with pytest.raises(NotFoundError):
            mutations.submit_mutation(
                inputter, request_type="data_change", table_name="critical_issues",
                record_id=999, new_data={"status": "PROSES"},
            )
