from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from ..auth.capabilities import Owner, current_identity
from ..core.exceptions import NotFoundError
from ..employees.model import Employee

if TYPE_CHECKING:
    from ..container import Container


def owner_of(employee: Employee) -> Owner:
    return Owner(user_id=employee.user_id, organization_id=employee.organization_id)


def load_employee(container: "Container", employee_id: int) -> Employee:
    employee = container.employees_repo.get_by_id(int(employee_id))
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


def caller_employee(container: "Container") -> Employee:
    """Employee profile of the authenticated user."""
    employee = container.employees_repo.get_by_user_id(current_identity().user_id)
    if not employee:
        raise NotFoundError("No employee profile for this account")
    return employee


def employee_owner(container: "Container") -> Callable[..., Owner]:
    def resolve(employee_id: int, **_) -> Owner:
        return owner_of(load_employee(container, employee_id))

    return resolve


def user_owner(container: "Container") -> Callable[..., Owner]:
    def resolve(user_id: int, **_) -> Owner:
        employee = container.employees_repo.get_by_user_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return owner_of(employee)

    return resolve


def payslip_owner(container: "Container") -> Callable[..., Owner]:
    def resolve(payslip_id: int, **_) -> Owner:
        payslip = container.payslip_service.get(payslip_id)
        return owner_of(load_employee(container, payslip.employee_id))

    return resolve


def attendance_owner(container: "Container") -> Callable[..., Owner]:
    def resolve(attendance_id: int, **_) -> Owner:
        record = container.attendance_repo.get(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return owner_of(load_employee(container, record.employee_id))

    return resolve


def leave_owner(container: "Container") -> Callable[..., Owner]:
    def resolve(leave_id: int, **_) -> Owner:
        leave = container.leave_service.get(leave_id)
        return owner_of(load_employee(container, leave.employee_id))

    return resolve
