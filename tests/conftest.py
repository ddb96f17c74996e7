from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from fakes import (
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryNotifications,
    InMemoryPayslips,
    InMemoryPolicies,
    make_employee,
)
from payroll_office.container import assemble_container
from payroll_office.core.enums import PayBasis


@pytest.fixture
def fixed_now() -> datetime:
    # Tuesday; March 2026 has 22 business days.
    return datetime(2026, 3, 10, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def repos():
    employees = InMemoryEmployees(make_employee(1), make_employee(2, pay_basis=PayBasis.HOURLY, base_rate="150"))
    return SimpleNamespace(
        employees=employees,
        attendance=InMemoryAttendance(employees),
        leaves=InMemoryLeaves(),
        payslips=InMemoryPayslips(),
        notifications=InMemoryNotifications(),
        policies=InMemoryPolicies(),
    )


@pytest.fixture
def container(repos):
    return assemble_container(
        employees_repo=repos.employees,
        attendance_repo=repos.attendance,
        leave_repo=repos.leaves,
        payslip_repo=repos.payslips,
        notification_repo=repos.notifications,
        policy_repo=repos.policies,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from payroll_office.main import create_app

    flask_app = create_app(container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()

