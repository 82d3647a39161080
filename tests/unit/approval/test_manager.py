"""Tests for the apply engine."""

import pytest

from opsdesk.core.approval.manager import ApprovalManager
from opsdesk.db.models import ApprovalRequest, CriticalIssue, SafetyIncident

from tests.factories import create_critical_issue, create_safety_incident


@pytest.fixture
def manager(db_session):
    return ApprovalManager(db_session)


class TestApplyApprovedChanges:
    """Applying approved payloads onto target records."""

    def test_data_change_updates_record(self, db_session, manager, department):
        issue = create_critical_issue(db_session, department=department)
        result = manager.apply_approved_changes(
            table_name="critical_issues",
            request_type="data_change",
            record_id=issue.id,
            new_data={"status": "BREAKDOWN", "_departmentId": department.id},
        )
        assert result.success
        assert result.data["status"] == "BREAKDOWN"
        assert db_session.get(CriticalIssue, issue.id).status == "BREAKDOWN"

    def test_data_deletion_removes_record(self, db_session, manager):
        incident = create_safety_incident(db_session, month=5)
        result = manager.apply_approved_changes(
            table_name="safety_incidents",
            request_type="data_deletion",
            record_id=incident.id,
        )
        assert result.success
        assert db_session.get(SafetyIncident, incident.id) is None

    def test_unsupported_table_is_soft_failure(self, db_session, manager):
        result = manager.apply_approved_changes(
            table_name="not_a_table",
            request_type="data_change",
            record_id=1,
            new_data={"status": "X"},
        )
        assert not result.success
        assert result.error == "Unsupported table for update: not_a_table"
        assert result.to_dict() == {"success": False, "error": result.error}
        assert not db_session.new and not db_session.dirty and not db_session.deleted

    def test_unknown_request_type(self, db_session, manager, department):
        issue = create_critical_issue(db_session, department=department)
        result = manager.apply_approved_changes(
            table_name="critical_issues",
            request_type="data_merge",
            record_id=issue.id,
            new_data={"status": "X"},
        )
        assert not result.success
        assert "Unknown request type" in result.error
        assert db_session.get(CriticalIssue, issue.id).status == "INVESTIGASI"

    def test_missing_record_id(self, manager):
        result = manager.apply_approved_changes(
            table_name="critical_issues",
            request_type="data_deletion",
        )
        assert not result.success
        assert result.error == "Record ID required for data deletion"

    def test_missing_record(self, manager):
        result = manager.apply_approved_changes(
            table_name="critical_issues",
            request_type="data_change",
            record_id=404,
            new_data={"status": "X"},
        )
        assert not result.success
        assert "not found" in result.error

    def test_invalid_payload_leaves_record_untouched(self, db_session, manager, department):
        issue = create_critical_issue(db_session, department=department)
        result = manager.apply_approved_changes(
            table_name="critical_issues",
            request_type="data_change",
            record_id=issue.id,
            new_data={"status": "X", "severity": "high"},
        )
        assert not result.success
        assert db_session.get(CriticalIssue, issue.id).status == "INVESTIGASI"

    def test_apply_request_uses_row_fields(self, db_session, manager, department):
        issue = create_critical_issue(db_session, department=department)
        request = ApprovalRequest(
            requester_id=3,
            request_type="data_change",
            table_name="critical_issues",
            record_id=issue.id,
            new_data={"description": "Root cause found"},
        )
        assert manager.apply_request(request).success
        assert db_session.get(CriticalIssue, issue.id).description == "Root cause found"
