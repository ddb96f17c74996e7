from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import inclusive_days
from ..common.validators import require_choice, require_non_empty
from ..core.constants import DEFAULT_LEAVE_ALLOWANCES
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import DependencyFailure, InvalidTransition, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.service import NotificationService
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_OPEN_STATUSES = (RequestStatus.PENDING, RequestStatus.APPROVED)


class LeaveService:
    """Use cases: apply for leave, decide it, report balances."""

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        allowances: Optional[Mapping[str, int]] = None,
        notifications: Optional[NotificationService] = None,
    ):
        self._leaves = leaves
        self._employees = employees
        self._allowances = dict(allowances or DEFAULT_LEAVE_ALLOWANCES)
        self._notifications = notifications

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def apply(
        self,
        *,
        employee_id: int,
        leave_type: str | LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        employee = self._get_employee(employee_id)
        if not employee.is_active:
            raise ValidationError("Inactive employees cannot apply for leave")

        kind = require_choice(leave_type, LeaveType, "type")
        if end_date < start_date:
            raise ValidationError("endDate must be on or after startDate")
        reason = require_non_empty(reason, "reason")

        overlapping = self._leaves.list_overlapping(
            employee.employee_id, start=start_date, end=end_date, statuses=_OPEN_STATUSES
        )
        if overlapping:
            raise ValidationError("Leave overlaps an existing pending or approved request")

        leave_id = self._leaves.create(
            employee_id=employee.employee_id,
            organization_id=employee.organization_id,
            leave_type=kind,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("leave %s requested by employee %s (%s days)", leave_id, employee.employee_id, inclusive_days(start_date, end_date))
        return self.get(leave_id)

    def _decide(self, *, leave_id: int, approver_id: int, status: RequestStatus, note: str) -> LeaveRequest:
        leave = self.get(leave_id)
        if leave.status != RequestStatus.PENDING:
            raise InvalidTransition(f"Leave request is already {leave.status.value}")

        ok = self._leaves.decide(
            leave_id=leave.leave_id,
            status=status,
            decided_by=int(approver_id),
            admin_note=(note or "").strip() or None,
        )
        if not ok:
            # Someone decided it between our read and the conditional update.
            raise InvalidTransition("Leave request is no longer pending")

        decided = self.get(leave.leave_id)
        if self._notifications:
            try:
                self._notifications.notify_leave_decision(decided)
            except DependencyFailure:
                logger.exception("leave %s decided but employee notification failed", decided.leave_id)
        return decided

    def approve(self, *, leave_id: int, approver_id: int, note: str = "") -> LeaveRequest:
        return self._decide(leave_id=leave_id, approver_id=approver_id, status=RequestStatus.APPROVED, note=note)

    def reject(self, *, leave_id: int, approver_id: int, note: str = "") -> LeaveRequest:
        return self._decide(leave_id=leave_id, approver_id=approver_id, status=RequestStatus.REJECTED, note=note)

    def history(self, employee_id: int, *, limit: int = 200) -> Sequence[LeaveRequest]:
        self._get_employee(employee_id)
        return self._leaves.list_for_employee(int(employee_id), limit=limit)

    def pending_for_organization(self, organization_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_organization(int(organization_id), status=RequestStatus.PENDING)

    def balance(self, employee_id: int, *, year: int) -> dict[LeaveType, LeaveBalance]:
        """Per-type balance for a calendar year.

        Consumed days are the inclusive spans of approved requests starting in `year`.
        """
        employee = self._get_employee(employee_id)
        approved = self._leaves.list_overlapping(
            employee.employee_id,
            start=date(year, 1, 1),
            end=date(year, 12, 31),
            statuses=(RequestStatus.APPROVED,),
        )

        consumed: dict[LeaveType, int] = {t: 0 for t in LeaveType}
        for leave in approved:
            if leave.start_date.year == year:
                consumed[leave.leave_type] += leave.days

        return {
            t: LeaveBalance(leave_type=t, total=int(self._allowances.get(t.value, 0)), consumed=consumed[t])
            for t in LeaveType
        }
