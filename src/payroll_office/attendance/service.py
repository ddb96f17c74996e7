from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc, business_days, hours_between, month_bounds, now_utc, utc_day
from ..common.validators import require_month, require_year
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, CheckMethod, RequestStatus
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    ConflictError,
    DuplicateRecordError,
    MissingCheckIn,
    NoCheckInFound,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from .model import WORKED_STATUSES, AttendanceRecord, MonthlySummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leaves: Optional[LeaveRepository] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._leaves = leaves

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def check_in(
        self,
        employee_id: int,
        *,
        now: Optional[datetime] = None,
        method: CheckMethod = CheckMethod.MANUAL,
    ) -> AttendanceRecord:
        # Stored DATETIME columns keep whole seconds.
        now = (as_utc(now) if now else now_utc()).replace(microsecond=0)
        today = utc_day(now)

        employee = self._get_employee(employee_id)
        if not employee.is_active:
            raise ValidationError("Inactive employees cannot check in")

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if existing and existing.check_in_time is not None:
            raise AlreadyCheckedIn("Already checked in today")

        if existing:
            # Pre-created record (e.g. marked absent ahead of time).
            ok = self._attendance.record_check_in(
                attendance_id=existing.attendance_id,
                check_in_time=now,
                method=method,
                status=AttendanceStatus.PRESENT,
            )
            if not ok:
                raise AlreadyCheckedIn("Already checked in today")
            return self._reload(existing.attendance_id)

        try:
            attendance_id = self._attendance.create(
                employee_id=employee.employee_id,
                organization_id=employee.organization_id,
                work_date=today,
                status=AttendanceStatus.PRESENT,
                check_in_time=now,
                check_in_method=method,
            )
        except DuplicateRecordError as e:
            raise AlreadyCheckedIn("Already checked in today") from e

        logger.info("employee %s checked in at %s (%s)", employee.employee_id, now.isoformat(), method.value)
        return self._reload(attendance_id)

    def check_out(
        self,
        employee_id: int,
        *,
        now: Optional[datetime] = None,
        method: CheckMethod = CheckMethod.MANUAL,
    ) -> AttendanceRecord:
        now = (as_utc(now) if now else now_utc()).replace(microsecond=0)
        today = utc_day(now)

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record:
            raise NoCheckInFound("No check-in found for today")
        if record.check_out_time is not None:
            raise AlreadyCheckedOut("Already checked out today")
        if record.check_in_time is None:
            raise MissingCheckIn("Today's attendance record has no check-in time")

        working_hours = hours_between(record.check_in_time, now)
        if working_hours < 0:
            logger.warning(
                "negative working hours for attendance %s: check-in %s, check-out %s",
                record.attendance_id,
                record.check_in_time.isoformat(),
                now.isoformat(),
            )

        ok = self._attendance.record_check_out(
            attendance_id=record.attendance_id,
            check_out_time=now,
            method=method,
            working_hours=working_hours,
        )
        if not ok:
            raise AlreadyCheckedOut("Already checked out today")

        logger.info("employee %s checked out after %.2f hours", record.employee_id, working_hours)
        return self._reload(record.attendance_id)

    def today_record(self, employee_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        today = utc_day(now or now_utc())
        return self._attendance.get_for_employee_and_date(int(employee_id), today)

    def history(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        if end < start:
            raise ValidationError("endDate must be on or after startDate")
        if (end - start).days >= 366:
            raise ValidationError("History range is limited to one year")
        self._get_employee(employee_id)
        return self._attendance.list_for_employee(int(employee_id), start=start, end=end)

    def recent_history(self, employee_id: int, *, today: Optional[date] = None) -> Sequence[AttendanceRecord]:
        end = today or utc_day(now_utc())
        start = end - timedelta(days=DEFAULT_HISTORY_LIMIT - 1)
        return self.history(employee_id, start=start, end=end)

    def mark_absent(self, employee_id: int, *, work_date: date, notes: Optional[str] = None) -> AttendanceRecord:
        """Pre-create an absent record for a day (insert-if-absent)."""
        employee = self._get_employee(employee_id)
        try:
            attendance_id = self._attendance.create(
                employee_id=employee.employee_id,
                organization_id=employee.organization_id,
                work_date=work_date,
                status=AttendanceStatus.ABSENT,
                notes=notes,
            )
        except DuplicateRecordError as e:
            raise ConflictError(f"Attendance for {work_date.isoformat()} already recorded") from e
        return self._reload(attendance_id)

    def correct_record(
        self,
        attendance_id: int,
        *,
        status: AttendanceStatus,
        check_in_time: Optional[datetime] = None,
        check_out_time: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Administrative correction of an existing record."""
        record = self._reload(int(attendance_id))

        new_in = as_utc(check_in_time).replace(microsecond=0) if check_in_time else record.check_in_time
        new_out = as_utc(check_out_time).replace(microsecond=0) if check_out_time else record.check_out_time
        if new_out and not new_in:
            raise ValidationError("Check-out requires a check-in time")
        if new_in and new_out and new_out < new_in:
            raise ValidationError("Check-out cannot be earlier than check-in")

        working_hours = hours_between(new_in, new_out) if new_in and new_out else None
        self._attendance.admin_update_record(
            attendance_id=record.attendance_id,
            check_in_time=new_in,
            check_out_time=new_out,
            status=status,
            working_hours=working_hours,
            notes=notes if notes is not None else record.notes,
        )
        logger.info("attendance %s corrected to %s", record.attendance_id, status.value)
        return self._reload(record.attendance_id)

    def monthly_summary(self, employee_id: int, *, month: int, year: int) -> MonthlySummary:
        """Classify every business day (Mon-Fri) of the month as present, leave or absent."""
        month = require_month(month)
        year = require_year(year)
        employee = self._get_employee(employee_id)

        start, end = month_bounds(year, month)
        records = {r.work_date: r for r in self._attendance.list_for_employee(employee.employee_id, start=start, end=end)}
        leaves = (
            self._leaves.list_overlapping(employee.employee_id, start=start, end=end, statuses=(RequestStatus.APPROVED,))
            if self._leaves
            else []
        )

        present = absent = on_leave = 0
        days = business_days(year, month)
        for day in days:
            record = records.get(day)
            if record and record.status in WORKED_STATUSES:
                present += 1
            elif any(leave.covers(day) for leave in leaves):
                on_leave += 1
            else:
                absent += 1

        return MonthlySummary(
            employee_id=employee.employee_id,
            month=month,
            year=year,
            present=present,
            absent=absent,
            leave=on_leave,
            total=len(days),
        )
