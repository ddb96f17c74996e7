from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, CheckMethod
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        organization_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime] = None,
        check_in_method: Optional[CheckMethod] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert a record; raises DuplicateRecordError when (employee, day) exists."""

        raise NotImplementedError

    def record_check_in(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        method: CheckMethod,
        status: AttendanceStatus,
    ) -> bool:
        """Fill the check-in of a pre-created record, only if it has none."""

        raise NotImplementedError

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        method: CheckMethod,
        working_hours: float,
    ) -> bool:
        """Fill the check-out, only if it has none."""

        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        working_hours: Optional[float],
        notes: Optional[str] = None,
    ) -> bool:
        """Administrative correction."""

        raise NotImplementedError

    def count_by_status(self, *, organization_id: int, work_date: date) -> Mapping[AttendanceStatus, int]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        organization_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
