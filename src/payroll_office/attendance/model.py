from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, CheckMethod

# Statuses that count as a worked day in the monthly summary.
WORKED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY})


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one UTC calendar day."""

    attendance_id: int
    employee_id: int
    organization_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_in_method: Optional[CheckMethod] = None
    check_out_time: Optional[datetime] = None
    check_out_method: Optional[CheckMethod] = None
    working_hours: Optional[float] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "organization_id": self.organization_id,
            "date": self.work_date.isoformat(),
            "check_in": (
                {"time": _iso(self.check_in_time), "method": self.check_in_method.value if self.check_in_method else None}
                if self.check_in_time
                else None
            ),
            "check_out": (
                {"time": _iso(self.check_out_time), "method": self.check_out_method.value if self.check_out_method else None}
                if self.check_out_time
                else None
            ),
            "status": self.status.value,
            "working_hours": self.working_hours,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports (joined with the employee)."""

    employee_id: int
    full_name: str
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    working_hours: Optional[float] = None


@dataclass(frozen=True)
class MonthlySummary:
    employee_id: int
    month: int
    year: int
    present: int
    absent: int
    leave: int
    total: int

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "month": self.month,
            "year": self.year,
            "present": self.present,
            "absent": self.absent,
            "leave": self.leave,
            "total": self.total,
        }
