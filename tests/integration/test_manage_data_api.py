"""End-to-end tests for the data-management endpoints."""

from opsdesk.db.models import ApprovalRequest, CriticalIssue

from tests.factories import create_critical_issue


class TestManageData:
    """PUT/DELETE /api/manage-data/{table}/{id}."""

    def test_admin_update_applied(self, client, db_session, auth_headers, admin, department):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()

        response = client.put(
            f"/api/manage-data/critical_issues/{issue.id}",
            json={"status": "SELESAI"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is True
        assert body["data"]["status"] == "SELESAI"

    def test_inputter_update_queued(self, client, db_session, auth_headers, inputter, department):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()

        response = client.put(
            f"/api/manage-data/critical_issues/{issue.id}",
            json={"status": "PROSES", "_reason": "Site visit done"},
            headers=auth_headers(inputter),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is False
        assert body["status"] == "PENDING"

        db_session.expire_all()
        request = db_session.get(ApprovalRequest, body["approvalRequestId"])
        assert request.reason == "Site visit done"
        assert db_session.get(CriticalIssue, issue.id).status == "INVESTIGASI"

    def test_planner_delete_queued_for_admin(self, client, db_session, auth_headers, planner, department):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()

        response = client.delete(f"/api/manage-data/critical_issues/{issue.id}", headers=auth_headers(planner))
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_ADMIN_APPROVAL"

    def test_planner_other_department_forbidden(self, client, db_session, auth_headers, planner, other_department):
        issue = create_critical_issue(db_session, department=other_department)
        db_session.commit()

        response = client.put(
            f"/api/manage-data/critical_issues/{issue.id}",
            json={"status": "SELESAI"},
            headers=auth_headers(planner),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Access denied to this department"

    def test_viewer_forbidden(self, client, db_session, auth_headers, viewer, department):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()
        response = client.delete(f"/api/manage-data/critical_issues/{issue.id}", headers=auth_headers(viewer))
        assert response.status_code == 403

    def test_unsupported_table(self, client, auth_headers, admin):
        response = client.put("/api/manage-data/users/1", json={"role": "ADMIN"}, headers=auth_headers(admin))
        assert response.status_code == 400
        assert response.json()["error"] == "Unsupported table for update: users"

    def test_invalid_payload(self, client, db_session, auth_headers, admin, department):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()
        response = client.put(
            f"/api/manage-data/critical_issues/{issue.id}",
            json={"severity": "HIGH"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "severity"

    def test_null_for_required_field(self, client, db_session, auth_headers, admin, department):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()
        response = client.put(
            f"/api/manage-data/critical_issues/{issue.id}",
            json={"status": None},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
        assert response.json()["details"] == [{"field": "status", "message": "Field cannot be null"}]

    def test_planner_cannot_move_record_out_of_department(
        self, client, db_session, auth_headers, planner, department, other_department
    ):
        issue = create_critical_issue(db_session, department=department)
        db_session.commit()
        response = client.put(
            f"/api/manage-data/critical_issues/{issue.id}",
            json={"departmentId": other_department.id},
            headers=auth_headers(planner),
        )
        assert response.status_code == 403

        db_session.expire_all()
        assert db_session.get(CriticalIssue, issue.id).department_id == department.id

    def test_missing_record(self, client, auth_headers, admin):
        response = client.delete("/api/manage-data/critical_issues/404", headers=auth_headers(admin))
        assert response.status_code == 404
