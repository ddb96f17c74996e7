from __future__ import annotations

from datetime import date

import pytest

from fakes import bearer
from payroll_office.core.enums import Role

EMPLOYEE_1 = bearer(101, Role.EMPLOYEE)
EMPLOYEE_2 = bearer(102, Role.EMPLOYEE)
MANAGER = bearer(500, Role.CLIENT, organization_id=1)
OTHER_MANAGER = bearer(501, Role.CLIENT, organization_id=2)
ADMIN = bearer(1, Role.ADMIN, organization_id=None)


def test_requests_without_token_are_rejected(client):
    resp = client.post("/api/attendance/check-in")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_check_in_then_duplicate(client):
    resp = client.post("/api/attendance/check-in", json={}, headers=EMPLOYEE_1)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["status"] == "present"

    again = client.post("/api/attendance/check-in", json={}, headers=EMPLOYEE_1)
    assert again.status_code == 400
    assert again.get_json()["success"] is False


def test_check_out_without_check_in_is_404(client):
    resp = client.post("/api/attendance/check-out", json={"method": "qr"}, headers=EMPLOYEE_1)

    assert resp.status_code == 404


def test_check_out_returns_working_hours(client):
    client.post("/api/attendance/check-in", headers=EMPLOYEE_1)

    resp = client.post("/api/attendance/check-out", json={"method": "qr"}, headers=EMPLOYEE_1)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["check_out"]["method"] == "qr"
    assert data["working_hours"] >= 0


def test_monthly_summary_invalid_month(client):
    resp = client.get("/api/attendance/monthly-summary/101?month=13&year=2026", headers=EMPLOYEE_1)

    assert resp.status_code == 400


def test_monthly_summary_for_self(client):
    resp = client.get("/api/attendance/monthly-summary/101?month=3&year=2026", headers=EMPLOYEE_1)

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["total"] == 22
    assert data["total"] == data["present"] + data["absent"] + data["leave"]


def test_employee_cannot_read_another_employees_summary(client):
    resp = client.get("/api/attendance/monthly-summary/102?month=3&year=2026", headers=EMPLOYEE_1)

    assert resp.status_code == 403


def test_manager_generates_payroll_for_own_organization(client):
    resp = client.post("/api/payroll/generate", json={"month": 3, "year": 2026}, headers=MANAGER)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["generated"] == 2
    assert all(p["status"] == "pending" for p in data["payslips"])


def test_payroll_generate_missing_params(client):
    resp = client.post("/api/payroll/generate", json={"year": 2026}, headers=MANAGER)

    assert resp.status_code == 400


def test_manager_cannot_target_other_organization(client):
    resp = client.post(
        "/api/payroll/generate",
        json={"month": 3, "year": 2026, "organizationId": 1},
        headers=OTHER_MANAGER,
    )

    assert resp.status_code == 403


def test_admin_must_name_organization(client):
    missing = client.post("/api/payroll/generate", json={"month": 3, "year": 2026}, headers=ADMIN)
    named = client.post("/api/payroll/generate", json={"month": 3, "year": 2026, "organizationId": 1}, headers=ADMIN)

    assert missing.status_code == 403
    assert named.status_code == 201


def test_single_generate_conflicts_on_duplicate(client):
    body = {"employeeId": 1, "month": 3, "year": 2026}

    first = client.post("/api/payslips/generate", json=body, headers=MANAGER)
    second = client.post("/api/payslips/generate", json=body, headers=MANAGER)

    assert first.status_code == 201
    assert second.status_code == 409


def test_payslip_lifecycle_over_http(client):
    created = client.post("/api/payslips/generate", json={"employeeId": 1, "month": 3, "year": 2026}, headers=MANAGER)
    payslip_id = created.get_json()["data"]["payslip_id"]

    early_paid = client.post(f"/api/payroll/mark-paid/{payslip_id}", headers=MANAGER)
    approved = client.post(f"/api/payroll/approve/{payslip_id}", headers=MANAGER)
    approved_again = client.post(f"/api/payroll/approve/{payslip_id}", headers=MANAGER)
    paid = client.post(f"/api/payroll/mark-paid/{payslip_id}", headers=MANAGER)

    assert early_paid.status_code == 409
    assert approved.status_code == 200
    assert approved.get_json()["data"]["approved_by"] == 500
    assert approved_again.status_code == 409
    assert paid.get_json()["data"]["status"] == "paid"


def test_approve_unknown_payslip_is_404(client):
    resp = client.post("/api/payroll/approve/9999", headers=MANAGER)

    assert resp.status_code == 404


def test_payslip_visibility(client):
    created = client.post("/api/payslips/generate", json={"employeeId": 1, "month": 3, "year": 2026}, headers=MANAGER)
    payslip_id = created.get_json()["data"]["payslip_id"]

    own = client.get(f"/api/payslips/{payslip_id}", headers=EMPLOYEE_1)
    other = client.get(f"/api/payslips/{payslip_id}", headers=EMPLOYEE_2)
    foreign_manager = client.get(f"/api/payslips/{payslip_id}", headers=OTHER_MANAGER)

    assert own.status_code == 200
    assert own.get_json()["data"]["payslip_id"] == payslip_id
    assert other.status_code == 403
    assert foreign_manager.status_code == 403


def test_void_then_regenerate(client):
    body = {"employeeId": 1, "month": 3, "year": 2026}
    created = client.post("/api/payslips/generate", json=body, headers=MANAGER)
    payslip_id = created.get_json()["data"]["payslip_id"]

    voided = client.delete(f"/api/payslips/{payslip_id}", headers=MANAGER)
    regenerated = client.post("/api/payslips/generate", json=body, headers=MANAGER)

    assert voided.status_code == 200
    assert regenerated.status_code == 201


def test_payroll_summary(client):
    client.post("/api/payroll/generate", json={"month": 3, "year": 2026}, headers=MANAGER)

    resp = client.get("/api/payroll/summary?month=3&year=2026", headers=MANAGER)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["counts"]["total"] == 2


def test_payroll_list_for_period(client):
    client.post("/api/payroll/generate", json={"month": 3, "year": 2026}, headers=MANAGER)
    first_id = client.get("/api/payroll?month=3&year=2026", headers=MANAGER).get_json()["data"][0]["payslip_id"]
    client.post(f"/api/payroll/approve/{first_id}", headers=MANAGER)

    everything = client.get("/api/payroll?month=3&year=2026", headers=MANAGER)
    approved = client.get("/api/payroll?month=3&year=2026&status=approved", headers=MANAGER)
    bad_status = client.get("/api/payroll?month=3&year=2026&status=lost", headers=MANAGER)
    as_employee = client.get("/api/payroll?month=3&year=2026", headers=EMPLOYEE_1)

    assert everything.status_code == 200
    assert len(everything.get_json()["data"]) == 2
    assert [p["payslip_id"] for p in approved.get_json()["data"]] == [first_id]
    assert bad_status.status_code == 400
    assert as_employee.status_code == 403


def test_reject_with_non_string_reason_is_400(client):
    created = client.post("/api/payslips/generate", json={"employeeId": 1, "month": 3, "year": 2026}, headers=MANAGER)
    payslip_id = created.get_json()["data"]["payslip_id"]

    resp = client.post(f"/api/payroll/reject/{payslip_id}", json={"reason": ["x"]}, headers=MANAGER)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_leave_apply_and_balance(client):
    applied = client.post(
        "/api/leave/apply",
        json={"type": "casual", "startDate": "2026-03-02", "endDate": "2026-03-04", "reason": "family"},
        headers=EMPLOYEE_1,
    )
    leave_id = applied.get_json()["data"]["leave_id"]
    decided = client.post(f"/api/leave/{leave_id}/approve", json={"note": "ok"}, headers=MANAGER)
    balance = client.get("/api/leave/balance/1?year=2026", headers=EMPLOYEE_1)

    assert applied.status_code == 201
    assert decided.status_code == 200
    assert balance.get_json()["data"]["casual"] == {"total": 10, "consumed": 3, "available": 7}


def test_leave_apply_validation_error(client):
    resp = client.post(
        "/api/leave/apply",
        json={"type": "casual", "startDate": "2026-03-04", "endDate": "2026-03-02", "reason": "x"},
        headers=EMPLOYEE_1,
    )

    assert resp.status_code == 400


def test_leave_apply_with_non_string_reason_is_400(client):
    resp = client.post(
        "/api/leave/apply",
        json={"type": "casual", "startDate": "2026-03-02", "endDate": "2026-03-04", "reason": 123},
        headers=EMPLOYEE_1,
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "reason must be a string"


def test_employee_cannot_approve_leave(client):
    applied = client.post(
        "/api/leave/apply",
        json={"type": "sick", "startDate": "2026-03-02", "endDate": "2026-03-02", "reason": "flu"},
        headers=EMPLOYEE_1,
    )
    leave_id = applied.get_json()["data"]["leave_id"]

    resp = client.post(f"/api/leave/{leave_id}/approve", headers=EMPLOYEE_1)

    assert resp.status_code == 403


def test_dashboard(client):
    resp = client.get("/api/reports/dashboard", headers=MANAGER)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["employees"]["total"] == 2


def test_dashboard_for_empty_organization(client):
    resp = client.get("/api/reports/dashboard", headers=OTHER_MANAGER)

    data = resp.get_json()["data"]
    assert data["attendance"]["attendance_rate"] == 0
    assert data["payroll"]["average_net_salary"] == "0.00"


def test_attendance_report_requires_dates(client):
    resp = client.get("/api/reports/attendance", headers=MANAGER)

    assert resp.status_code == 400


@pytest.mark.parametrize("query", ["startDate=2026-03-01", "endDate=2026-03-09"])
def test_history_needs_both_dates(client, query):
    resp = client.get(f"/api/attendance/history/1?{query}", headers=MANAGER)

    assert resp.status_code == 400


def test_mark_absent_and_correct(client):
    marked = client.post(
        "/api/attendance/mark-absent",
        json={"employeeId": 2, "date": date(2026, 3, 9).isoformat()},
        headers=MANAGER,
    )
    attendance_id = marked.get_json()["data"]["attendance_id"]
    corrected = client.put(
        f"/api/attendance/{attendance_id}",
        json={"status": "present", "checkInTime": "2026-03-09T08:00:00Z", "checkOutTime": "2026-03-09T17:00:00Z"},
        headers=MANAGER,
    )

    assert marked.status_code == 201
    assert corrected.status_code == 200
    assert corrected.get_json()["data"]["working_hours"] == 9.0


def test_mark_absent_twice_is_409(client):
    body = {"employeeId": 1, "date": date(2026, 3, 9).isoformat()}

    client.post("/api/attendance/mark-absent", json=body, headers=MANAGER)
    again = client.post("/api/attendance/mark-absent", json=body, headers=MANAGER)

    assert again.status_code == 409
    assert again.get_json()["success"] is False


def test_unexpected_errors_are_generic_500(client, container, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db password is hunter2")

    monkeypatch.setattr(container.report_service, "organization_dashboard", boom)

    resp = client.get("/api/reports/dashboard", headers=MANAGER)

    assert resp.status_code == 500
    assert "hunter2" not in resp.get_data(as_text=True)


@pytest.mark.parametrize("path", ["/api/unknown", "/api/attendance/history/abc"])
def test_unknown_routes_use_json_envelope(client, path):
    resp = client.get(path, headers=MANAGER)

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False
