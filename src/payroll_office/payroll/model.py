from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, PayBasis, PayslipStatus

CENT = Decimal("0.01")

# Allowed payslip status changes; rejected and paid are terminal.
TRANSITIONS = {
    PayslipStatus.PENDING: frozenset({PayslipStatus.APPROVED, PayslipStatus.REJECTED}),
    PayslipStatus.APPROVED: frozenset({PayslipStatus.PAID}),
    PayslipStatus.REJECTED: frozenset(),
    PayslipStatus.PAID: frozenset(),
}


def money(value: Any) -> Decimal:
    """Round to cents, half-up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def can_transition(current: PayslipStatus, target: PayslipStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


@dataclass(frozen=True)
class PayLine:
    name: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {"name": self.name, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict) -> "PayLine":
        return cls(name=str(data["name"]), amount=money(data["amount"]))


@dataclass(frozen=True)
class AttendanceSnapshot:
    """Attendance counts of the pay period, frozen into the payslip."""

    present: int = 0
    absent: int = 0
    late: int = 0
    half_day: int = 0

    @classmethod
    def from_records(cls, records: Iterable[AttendanceRecord]) -> "AttendanceSnapshot":
        counts = {s: 0 for s in AttendanceStatus}
        for r in records:
            counts[r.status] += 1
        return cls(
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            late=counts[AttendanceStatus.LATE],
            half_day=counts[AttendanceStatus.HALF_DAY],
        )

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "late": self.late, "half_day": self.half_day}


class _PayTotals:
    """Derived money totals; never stored as the source of truth."""

    basic_salary: Decimal
    allowances: Tuple[PayLine, ...]
    deductions: Tuple[PayLine, ...]

    @property
    def total_allowances(self) -> Decimal:
        return money(sum((a.amount for a in self.allowances), Decimal("0")))

    @property
    def total_deductions(self) -> Decimal:
        return money(sum((d.amount for d in self.deductions), Decimal("0")))

    @property
    def gross_salary(self) -> Decimal:
        return money(self.basic_salary + self.total_allowances)

    @property
    def net_salary(self) -> Decimal:
        return money(self.gross_salary - self.total_deductions)


@dataclass(frozen=True)
class PayComponents(_PayTotals):
    """Calculator output for one employee and one period."""

    pay_basis: PayBasis
    rate: Decimal
    days_worked: int
    working_hours: Decimal
    overtime_hours: Decimal
    basic_salary: Decimal
    allowances: Tuple[PayLine, ...]
    deductions: Tuple[PayLine, ...]
    attendance: AttendanceSnapshot

    @property
    def total_amount(self) -> Decimal:
        """Basic pay earned for the period."""
        return self.basic_salary


@dataclass(frozen=True)
class Payslip(_PayTotals):
    payslip_id: int
    employee_id: int
    organization_id: int
    month: int
    year: int
    pay_basis: PayBasis
    rate: Decimal
    days_worked: int
    working_hours: Decimal
    overtime_hours: Decimal
    basic_salary: Decimal
    allowances: Tuple[PayLine, ...]
    deductions: Tuple[PayLine, ...]
    attendance: AttendanceSnapshot
    status: PayslipStatus
    generated_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    paid_at: Optional[datetime] = None

    @property
    def total_amount(self) -> Decimal:
        return self.basic_salary

    def to_dict(self) -> dict:
        return {
            "payslip_id": self.payslip_id,
            "employee_id": self.employee_id,
            "organization_id": self.organization_id,
            "month": self.month,
            "year": self.year,
            "pay_basis": self.pay_basis.value,
            "rate": str(self.rate),
            "days_worked": self.days_worked,
            "working_hours": str(self.working_hours),
            "overtime_hours": str(self.overtime_hours),
            "basic_salary": str(self.basic_salary),
            "total_amount": str(self.total_amount),
            "allowances": [a.to_dict() for a in self.allowances],
            "deductions": [d.to_dict() for d in self.deductions],
            "gross_salary": str(self.gross_salary),
            "net_salary": str(self.net_salary),
            "attendance": self.attendance.to_dict(),
            "status": self.status.value,
            "generated_at": self.generated_at.isoformat(),
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejection_reason": self.rejection_reason,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
        }


@dataclass(frozen=True)
class PeriodSummary:
    organization_id: int
    month: int
    year: int
    counts: dict
    amounts: dict

    def to_dict(self) -> dict:
        return {
            "organization_id": self.organization_id,
            "month": self.month,
            "year": self.year,
            "counts": self.counts,
            "amounts": {k: str(v) for k, v in self.amounts.items()},
        }
