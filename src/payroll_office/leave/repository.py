from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        organization_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_overlapping(
        self,
        employee_id: int,
        *,
        start: date,
        end: date,
        statuses: Iterable[RequestStatus],
    ) -> Sequence[LeaveRequest]:
        """Requests of the employee whose span intersects [start, end]."""

        raise NotImplementedError

    def list_for_organization(
        self,
        organization_id: int,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Move a pending request to approved/rejected. False if it was not pending."""

        raise NotImplementedError

    def count_by_status(self, *, organization_id: int) -> Mapping[RequestStatus, int]:
        raise NotImplementedError
