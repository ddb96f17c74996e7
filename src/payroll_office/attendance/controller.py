from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, request

from ..auth.capabilities import Capability, authorize, requires
from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.validators import require_choice, require_int
from ..core.enums import AttendanceStatus, CheckMethod
from ..core.exceptions import ValidationError
from ..web.owners import attendance_owner, caller_employee, employee_owner, load_employee, owner_of, user_owner
from ..web.responses import json_body, ok

if TYPE_CHECKING:
    from ..container import Container

MANAGERS = (Capability.ADMIN, Capability.ORG_MANAGER)


def register(app: Flask, container: "Container") -> None:
    def _method(data: dict) -> CheckMethod:
        return require_choice(data.get("method") or CheckMethod.MANUAL.value, CheckMethod, "method")

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_attendance_check_in")
    @requires(Capability.SELF)
    def check_in():
        employee = caller_employee(container)
        record = container.attendance_service.check_in(employee.employee_id, method=_method(json_body()))
        return ok(record.to_dict(), status=201, message="Checked in successfully")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_attendance_check_out")
    @requires(Capability.SELF)
    def check_out():
        employee = caller_employee(container)
        record = container.attendance_service.check_out(employee.employee_id, method=_method(json_body()))
        return ok(record.to_dict(), message="Checked out successfully")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @requires(Capability.SELF)
    def today():
        employee = caller_employee(container)
        record = container.attendance_service.today_record(employee.employee_id)
        return ok(record.to_dict() if record else None)

    @app.route("/api/attendance/history/<int:employee_id>", methods=["GET"], endpoint="api_attendance_history")
    @requires(*MANAGERS, Capability.SELF, owner=employee_owner(container))
    def history(employee_id: int):
        start = request.args.get("startDate")
        end = request.args.get("endDate")
        if bool(start) != bool(end):
            raise ValidationError("startDate and endDate must be given together")
        if start and end:
            records = container.attendance_service.history(
                employee_id, start=parse_iso_date(start), end=parse_iso_date(end)
            )
        else:
            records = container.attendance_service.recent_history(employee_id)
        return ok([r.to_dict() for r in records])

    @app.route(
        "/api/attendance/monthly-summary/<int:user_id>",
        methods=["GET"],
        endpoint="api_attendance_monthly_summary",
    )
    @requires(*MANAGERS, Capability.SELF, owner=user_owner(container))
    def monthly_summary(user_id: int):
        employee = container.employees_repo.get_by_user_id(user_id)
        summary = container.attendance_service.monthly_summary(
            employee.employee_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return ok(summary.to_dict())

    @app.route("/api/attendance/mark-absent", methods=["POST"], endpoint="api_attendance_mark_absent")
    @requires(*MANAGERS)
    def mark_absent():
        data = json_body()
        employee = load_employee(container, require_int(data.get("employeeId"), "employeeId"))
        authorize(owner_of(employee), *MANAGERS)
        record = container.attendance_service.mark_absent(
            employee.employee_id,
            work_date=parse_iso_date(data.get("date") or ""),
            notes=data.get("notes"),
        )
        return ok(record.to_dict(), status=201)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="api_attendance_correct")
    @requires(*MANAGERS, owner=attendance_owner(container))
    def correct(attendance_id: int):
        data = json_body()
        check_in_time = data.get("checkInTime")
        check_out_time = data.get("checkOutTime")
        record = container.attendance_service.correct_record(
            attendance_id,
            status=require_choice(data.get("status"), AttendanceStatus, "status"),
            check_in_time=parse_iso_datetime(check_in_time) if check_in_time else None,
            check_out_time=parse_iso_datetime(check_out_time) if check_out_time else None,
            notes=data.get("notes"),
        )
        return ok(record.to_dict())
