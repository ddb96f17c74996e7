from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_utc, month_bounds, now_utc
from ..common.validators import require_month, require_non_empty, require_year
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PayslipStatus
from ..core.exceptions import (
    DuplicatePeriod,
    DuplicateRecordError,
    InvalidTransition,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.dispatch import PayslipDispatcher
from ..notifications.service import NotificationService
from .calculator.factory import compute_payroll
from .model import Payslip, PeriodSummary, can_transition, money
from .policy import RatePolicy
from .policy_repository import PolicyRepository
from .repository import PayslipRepository

logger = logging.getLogger(__name__)

_VOIDABLE = (PayslipStatus.PENDING, PayslipStatus.REJECTED)
_UNPAYABLE = frozenset({PayslipStatus.REJECTED})


@dataclass(frozen=True)
class BatchResult:
    month: int
    year: int
    generated: list[Payslip] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "generated": len(self.generated),
            "skipped_employee_ids": list(self.skipped),
            "payslips": [p.to_dict() for p in self.generated],
        }


class PayslipService:
    """Use cases: generate payslips and move them through their lifecycle.

    pending -> approved -> paid, or pending -> rejected. Notifications and
    dispatch after a successful write are best-effort: a failure is logged
    and never undoes the write.
    """

    def __init__(
        self,
        payslips: PayslipRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        policy: Optional[RatePolicy] = None,
        policies: Optional[PolicyRepository] = None,
        notifications: Optional[NotificationService] = None,
        dispatcher: Optional[PayslipDispatcher] = None,
    ):
        self._payslips = payslips
        self._employees = employees
        self._attendance = attendance
        self._policy = policy or RatePolicy.from_mapping()
        self._policies = policies
        self._notifications = notifications
        self._dispatcher = dispatcher

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def policy_for(self, organization_id: int) -> RatePolicy:
        if not self._policies:
            return self._policy
        return self._policy.merged(self._policies.get_overrides(int(organization_id)))

    def get(self, payslip_id: int) -> Payslip:
        payslip = self._payslips.get(int(payslip_id))
        if not payslip:
            raise NotFoundError("Payslip not found")
        return payslip

    def list_for_employee(self, employee_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Payslip]:
        self._get_employee(employee_id)
        return self._payslips.list_for_employee(int(employee_id), limit=limit)

    def generate(self, employee_id: int, *, month: int, year: int, now: Optional[datetime] = None) -> Payslip:
        month = require_month(month)
        year = require_year(year)
        employee = self._get_employee(employee_id)
        return self._generate(employee, month=month, year=year, policy=self.policy_for(employee.organization_id), now=now)

    def _generate(self, employee: Employee, *, month: int, year: int, policy: RatePolicy, now: Optional[datetime]) -> Payslip:
        if not employee.is_active:
            raise ValidationError("Cannot generate a payslip for an inactive employee")

        if self._payslips.get_for_period(employee.employee_id, month=month, year=year):
            raise DuplicatePeriod("Payslip already exists for this period")

        start, end = month_bounds(year, month)
        records = self._attendance.list_for_employee(employee.employee_id, start=start, end=end)
        components = compute_payroll(employee, records, policy)

        try:
            payslip_id = self._payslips.create(
                employee_id=employee.employee_id,
                organization_id=employee.organization_id,
                month=month,
                year=year,
                components=components,
                generated_at=as_utc(now) if now else now_utc(),
            )
        except DuplicateRecordError as e:
            raise DuplicatePeriod("Payslip already exists for this period") from e

        payslip = self.get(payslip_id)
        logger.info(
            "payslip %s generated for employee %s %02d/%s net=%s",
            payslip.payslip_id,
            employee.employee_id,
            month,
            year,
            payslip.net_salary,
        )

        if self._notifications:
            try:
                self._notifications.notify_payslip_generated(payslip)
            except Exception:
                logger.exception("payslip %s generated but employee notification failed", payslip.payslip_id)
        return payslip

    def generate_for_organization(
        self,
        organization_id: int,
        *,
        month: int,
        year: int,
        now: Optional[datetime] = None,
    ) -> BatchResult:
        month = require_month(month)
        year = require_year(year)
        policy = self.policy_for(organization_id)
        result = BatchResult(month=month, year=year)

        for employee in self._employees.list_active_for_organization(int(organization_id)):
            try:
                result.generated.append(self._generate(employee, month=month, year=year, policy=policy, now=now))
            except DuplicatePeriod:
                result.skipped.append(employee.employee_id)

        logger.info(
            "payroll run for organization %s %02d/%s: %d generated, %d skipped",
            organization_id,
            month,
            year,
            len(result.generated),
            len(result.skipped),
        )
        return result

    def _transition(
        self,
        payslip_id: int,
        target: PayslipStatus,
        *,
        decided_by: Optional[int] = None,
        rejection_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Payslip:
        payslip = self.get(payslip_id)
        if not can_transition(payslip.status, target):
            raise InvalidTransition(f"Cannot move payslip from {payslip.status.value} to {target.value}")

        ok = self._payslips.transition(
            payslip_id=payslip.payslip_id,
            expected=payslip.status,
            target=target,
            at=as_utc(now) if now else now_utc(),
            decided_by=decided_by,
            rejection_reason=rejection_reason,
        )
        if not ok:
            raise InvalidTransition(f"Payslip is no longer {payslip.status.value}")

        logger.info("payslip %s %s -> %s", payslip.payslip_id, payslip.status.value, target.value)
        return self.get(payslip.payslip_id)

    def approve(self, payslip_id: int, *, approver_id: int, now: Optional[datetime] = None) -> Payslip:
        approved = self._transition(payslip_id, PayslipStatus.APPROVED, decided_by=int(approver_id), now=now)

        if self._dispatcher:
            try:
                self._dispatcher.dispatch(approved, self._get_employee(approved.employee_id))
            except Exception:
                # Approval is already committed here.
                logger.exception("payslip %s approved but dispatch failed", approved.payslip_id)
        return approved

    def reject(self, payslip_id: int, *, approver_id: int, reason: str, now: Optional[datetime] = None) -> Payslip:
        reason = require_non_empty(reason, "reason")
        return self._transition(
            payslip_id,
            PayslipStatus.REJECTED,
            decided_by=int(approver_id),
            rejection_reason=reason,
            now=now,
        )

    def mark_paid(self, payslip_id: int, *, now: Optional[datetime] = None) -> Payslip:
        return self._transition(payslip_id, PayslipStatus.PAID, now=now)

    def void(self, payslip_id: int) -> None:
        """Delete a pending or rejected payslip so the period can be regenerated."""
        payslip = self.get(payslip_id)
        if payslip.status not in _VOIDABLE:
            raise InvalidTransition(f"Cannot void a {payslip.status.value} payslip")
        if not self._payslips.delete_if_status(payslip.payslip_id, _VOIDABLE):
            raise InvalidTransition("Payslip changed status and can no longer be voided")
        logger.info("payslip %s voided", payslip.payslip_id)

    def list_for_period(
        self,
        organization_id: int,
        *,
        month: int,
        year: int,
        status: Optional[PayslipStatus] = None,
    ) -> Sequence[Payslip]:
        month = require_month(month)
        year = require_year(year)
        payslips = self._payslips.list_for_period(int(organization_id), month=month, year=year)
        if status is not None:
            payslips = [p for p in payslips if p.status == status]
        return payslips

    def period_summary(self, organization_id: int, *, month: int, year: int) -> PeriodSummary:
        """Counts and net amounts per status. "total" leaves out rejected payslips, which are never paid."""
        month = require_month(month)
        year = require_year(year)
        payslips = self._payslips.list_for_period(int(organization_id), month=month, year=year)

        counts = {s.value: 0 for s in PayslipStatus}
        amounts = {s.value: Decimal("0") for s in PayslipStatus}
        for p in payslips:
            counts[p.status.value] += 1
            amounts[p.status.value] += p.net_salary

        payable = [s.value for s in PayslipStatus if s not in _UNPAYABLE]
        counts["total"] = sum(counts[s] for s in payable)
        amounts = {k: money(v) for k, v in amounts.items()}
        amounts["total"] = money(sum((amounts[s] for s in payable), Decimal("0")))

        return PeriodSummary(organization_id=int(organization_id), month=month, year=year, counts=counts, amounts=amounts)
