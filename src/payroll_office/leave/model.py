from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import inclusive_days
from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    organization_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None

    @property
    def days(self) -> int:
        return inclusive_days(self.start_date, self.end_date)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "leave_id": self.leave_id,
            "employee_id": self.employee_id,
            "organization_id": self.organization_id,
            "type": self.leave_type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "decided_by": self.decided_by,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "admin_note": self.admin_note,
        }


@dataclass(frozen=True)
class LeaveBalance:
    leave_type: LeaveType
    total: int
    consumed: int

    @property
    def available(self) -> int:
        return max(self.total - self.consumed, 0)

    def to_dict(self) -> dict:
        return {"total": self.total, "consumed": self.consumed, "available": self.available}
