"""In-memory repositories and helpers shared by the test modules."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from payroll_office.attendance.model import AttendanceRecord, AttendanceReportRow
from payroll_office.auth.tokens import Identity, issue_token
from payroll_office.core.enums import (
    AttendanceStatus,
    EmployeeStatus,
    EmploymentType,
    PayBasis,
    PayslipStatus,
    RequestStatus,
    Role,
)
from payroll_office.core.exceptions import DuplicateRecordError
from payroll_office.employees.model import Employee
from payroll_office.leave.model import LeaveRequest
from payroll_office.payroll.model import Payslip

TEST_SECRET = "test-secret"


def make_employee(
    employee_id: int = 1,
    *,
    user_id: Optional[int] = None,
    organization_id: int = 1,
    pay_basis: PayBasis = PayBasis.DAILY,
    base_rate: str = "1000",
    status: EmployeeStatus = EmployeeStatus.ACTIVE,
) -> Employee:
    return Employee(
        employee_id=employee_id,
        user_id=user_id if user_id is not None else 100 + employee_id,
        organization_id=organization_id,
        full_name=f"Employee {employee_id}",
        email=f"e{employee_id}@example.com",
        employment_type=EmploymentType.FULL_TIME,
        pay_basis=pay_basis,
        base_rate=Decimal(base_rate),
        status=status,
    )


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self._by_id[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.user_id == int(user_id)), None)

    def list_active_for_organization(self, organization_id: int):
        return sorted(
            (e for e in self._by_id.values() if e.organization_id == organization_id and e.is_active),
            key=lambda e: e.employee_id,
        )

    def count_active_for_organization(self, organization_id: int) -> int:
        return len(self.list_active_for_organization(organization_id))


class InMemoryAttendance:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, **fields) -> AttendanceRecord:
        """Seed a record directly (bypasses the service)."""
        attendance_id = self.create(
            employee_id=fields.pop("employee_id"),
            organization_id=fields.pop("organization_id", 1),
            work_date=fields.pop("work_date"),
            status=fields.pop("status", AttendanceStatus.PRESENT),
        )
        record = replace(self._by_id[attendance_id], **fields)
        self._by_id[attendance_id] = record
        return record

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self._by_id.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def list_for_employee(self, employee_id: int, *, start: date, end: date):
        items = [r for r in self._by_id.values() if r.employee_id == employee_id and start <= r.work_date <= end]
        return sorted(items, key=lambda r: r.work_date)

    def create(
        self,
        *,
        employee_id,
        organization_id,
        work_date,
        status,
        check_in_time=None,
        check_in_method=None,
        notes=None,
    ) -> int:
        if any(r.employee_id == employee_id and r.work_date == work_date for r in self._by_id.values()):
            raise DuplicateRecordError("attendance record already exists")
        self._id += 1
        self._by_id[self._id] = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            organization_id=organization_id,
            work_date=work_date,
            status=status,
            check_in_time=check_in_time,
            check_in_method=check_in_method,
            notes=notes,
        )
        return self._id

    def record_check_in(self, *, attendance_id, check_in_time, method, status) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec or rec.check_in_time is not None:
            return False
        self._by_id[attendance_id] = replace(rec, check_in_time=check_in_time, check_in_method=method, status=status)
        return True

    def record_check_out(self, *, attendance_id, check_out_time, method, working_hours) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec or rec.check_out_time is not None:
            return False
        self._by_id[attendance_id] = replace(
            rec, check_out_time=check_out_time, check_out_method=method, working_hours=working_hours
        )
        return True

    def admin_update_record(self, *, attendance_id, check_in_time, check_out_time, status, working_hours, notes=None) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec:
            return False
        self._by_id[attendance_id] = replace(
            rec,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            working_hours=working_hours,
            notes=notes,
        )
        return True

    def count_by_status(self, *, organization_id, work_date):
        counts: dict[AttendanceStatus, int] = {}
        for r in self._by_id.values():
            if r.organization_id == organization_id and r.work_date == work_date:
                counts[r.status] = counts.get(r.status, 0) + 1
        return counts

    def get_report_rows(self, *, organization_id, start_date, end_date, employee_id=None):
        rows = []
        for r in self._by_id.values():
            if r.organization_id != organization_id or not start_date <= r.work_date <= end_date:
                continue
            if employee_id is not None and r.employee_id != employee_id:
                continue
            employee = self._employees.get_by_id(r.employee_id)
            rows.append(
                AttendanceReportRow(
                    employee_id=r.employee_id,
                    full_name=employee.full_name if employee else "-",
                    work_date=r.work_date,
                    status=r.status,
                    check_in_time=r.check_in_time,
                    check_out_time=r.check_out_time,
                    working_hours=r.working_hours,
                )
            )
        rows.sort(key=lambda row: (row.work_date, -row.employee_id), reverse=True)
        return rows


class InMemoryLeaves:
    def __init__(self):
        self._by_id: dict[int, LeaveRequest] = {}
        self._id = 0

    def create(self, *, employee_id, organization_id, leave_type, start_date, end_date, reason) -> int:
        self._id += 1
        self._by_id[self._id] = LeaveRequest(
            leave_id=self._id,
            employee_id=employee_id,
            organization_id=organization_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc),
        )
        return self._id

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        return self._by_id.get(int(leave_id))

    def list_for_employee(self, employee_id, *, status=None, limit=200):
        items = [
            lr for lr in self._by_id.values()
            if lr.employee_id == employee_id and (status is None or lr.status == status)
        ]
        return sorted(items, key=lambda lr: lr.start_date, reverse=True)[:limit]

    def list_overlapping(self, employee_id, *, start, end, statuses):
        wanted = set(statuses)
        return [
            lr for lr in self._by_id.values()
            if lr.employee_id == employee_id
            and lr.status in wanted
            and lr.start_date <= end
            and lr.end_date >= start
        ]

    def list_for_organization(self, organization_id, *, status=None, limit=500):
        items = [
            lr for lr in self._by_id.values()
            if lr.organization_id == organization_id and (status is None or lr.status == status)
        ]
        return items[:limit]

    def decide(self, *, leave_id, status, decided_by, admin_note=None) -> bool:
        lr = self._by_id.get(leave_id)
        if not lr or lr.status != RequestStatus.PENDING:
            return False
        self._by_id[leave_id] = replace(
            lr,
            status=status,
            decided_by=decided_by,
            decided_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc),
            admin_note=admin_note,
        )
        return True

    def count_by_status(self, *, organization_id):
        counts: dict[RequestStatus, int] = {}
        for lr in self._by_id.values():
            if lr.organization_id == organization_id:
                counts[lr.status] = counts.get(lr.status, 0) + 1
        return counts


class InMemoryPayslips:
    def __init__(self):
        self._by_id: dict[int, Payslip] = {}
        self._id = 0

    def create(self, *, employee_id, organization_id, month, year, components, generated_at) -> int:
        if any(
            p.employee_id == employee_id and p.month == month and p.year == year for p in self._by_id.values()
        ):
            raise DuplicateRecordError("payslip for this period already exists")
        self._id += 1
        c = components
        self._by_id[self._id] = Payslip(
            payslip_id=self._id,
            employee_id=employee_id,
            organization_id=organization_id,
            month=month,
            year=year,
            pay_basis=c.pay_basis,
            rate=c.rate,
            days_worked=c.days_worked,
            working_hours=c.working_hours,
            overtime_hours=c.overtime_hours,
            basic_salary=c.basic_salary,
            allowances=c.allowances,
            deductions=c.deductions,
            attendance=c.attendance,
            status=PayslipStatus.PENDING,
            generated_at=generated_at,
        )
        return self._id

    def get(self, payslip_id: int) -> Optional[Payslip]:
        return self._by_id.get(int(payslip_id))

    def get_for_period(self, employee_id, *, month, year) -> Optional[Payslip]:
        return next(
            (
                p for p in self._by_id.values()
                if p.employee_id == employee_id and p.month == month and p.year == year
            ),
            None,
        )

    def list_for_employee(self, employee_id, *, limit=200):
        items = [p for p in self._by_id.values() if p.employee_id == employee_id]
        return sorted(items, key=lambda p: (p.year, p.month), reverse=True)[:limit]

    def list_for_period(self, organization_id, *, month, year):
        return [
            p for p in self._by_id.values()
            if p.organization_id == organization_id and p.month == month and p.year == year
        ]

    def transition(self, *, payslip_id, expected, target, at, decided_by=None, rejection_reason=None) -> bool:
        p = self._by_id.get(payslip_id)
        if not p or p.status != expected:
            return False
        if target == PayslipStatus.PAID:
            self._by_id[payslip_id] = replace(p, status=target, paid_at=at)
        else:
            self._by_id[payslip_id] = replace(
                p, status=target, approved_by=decided_by, approved_at=at, rejection_reason=rejection_reason
            )
        return True

    def delete_if_status(self, payslip_id, statuses) -> bool:
        p = self._by_id.get(payslip_id)
        if not p or p.status not in set(statuses):
            return False
        del self._by_id[payslip_id]
        return True

    def totals_by_status(self, organization_id, *, month, year):
        totals: dict[PayslipStatus, tuple[int, Decimal]] = {}
        for p in self.list_for_period(organization_id, month=month, year=year):
            n, amount = totals.get(p.status, (0, Decimal("0")))
            totals[p.status] = (n + 1, amount + p.net_salary)
        return totals


class InMemoryNotifications:
    def __init__(self, *, fail: bool = False):
        self.sent = []
        self.fail = fail

    def create(self, notification) -> int:
        if self.fail:
            raise RuntimeError("notification store unavailable")
        self.sent.append(notification)
        return len(self.sent)


class InMemoryPolicies:
    def __init__(self, overrides: Optional[dict] = None):
        self.overrides = overrides or {}

    def get_overrides(self, organization_id: int):
        return self.overrides.get(organization_id, {})


def bearer(user_id: int, role: Role, organization_id: Optional[int] = 1) -> dict:
    token = issue_token(Identity(user_id=user_id, role=role, organization_id=organization_id), secret_key=TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}
