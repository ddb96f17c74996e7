from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Sequence

from ...attendance.model import AttendanceRecord
from ...core.enums import AttendanceStatus, PayBasis
from ...employees.model import Employee
from ..model import AttendanceSnapshot, PayComponents, PayLine, money
from ..policy import RatePolicy

ZERO = Decimal("0")


def _hours(record: AttendanceRecord) -> Decimal:
    # Negative spans (check-out before check-in) earn nothing.
    if record.working_hours is None or record.working_hours <= 0:
        return ZERO
    return Decimal(str(record.working_hours))


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Subclasses only decide how the basic salary and the hourly equivalent
    of the base rate are derived; allowances and deductions are shared.
    """

    pay_basis: PayBasis

    @abstractmethod
    def basic_salary(self, rate: Decimal, *, days_worked: int, hours_worked: Decimal, policy: RatePolicy) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def hourly_rate(self, rate: Decimal, policy: RatePolicy) -> Decimal:
        raise NotImplementedError

    def compute(self, employee: Employee, records: Sequence[AttendanceRecord], policy: RatePolicy) -> PayComponents:
        rate = money(employee.base_rate)
        worked = [r for r in records if r.status == AttendanceStatus.PRESENT]

        days_worked = len(worked)
        hours_worked = sum((_hours(r) for r in worked), ZERO)
        overtime_hours = sum((max(_hours(r) - policy.standard_hours_per_day, ZERO) for r in worked), ZERO)

        basic = money(self.basic_salary(rate, days_worked=days_worked, hours_worked=hours_worked, policy=policy))
        overtime_pay = money(overtime_hours * self.hourly_rate(rate, policy) * policy.overtime_multiplier)

        allowances = _lines(
            ("Housing Allowance", basic * policy.housing_allowance_pct),
            ("Transport Allowance", basic * policy.transport_allowance_pct),
            ("Overtime", overtime_pay),
        )
        # A period with no basic pay carries no flat health deduction.
        health = policy.health_insurance_amount if basic > 0 else ZERO
        deductions = _lines(
            ("Income Tax", basic * policy.tax_pct),
            ("Provident Fund", basic * policy.provident_fund_pct),
            ("Health Insurance", health),
        )

        return PayComponents(
            pay_basis=self.pay_basis,
            rate=rate,
            days_worked=days_worked,
            working_hours=money(hours_worked),
            overtime_hours=money(overtime_hours),
            basic_salary=basic,
            allowances=allowances,
            deductions=deductions,
            attendance=AttendanceSnapshot.from_records(records),
        )


def _lines(*items) -> tuple:
    out = []
    for name, amount in items:
        amount = money(amount)
        if amount > 0:
            out.append(PayLine(name=name, amount=amount))
    return tuple(out)
