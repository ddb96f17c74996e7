from __future__ import annotations

from typing import Sequence

from ...attendance.model import AttendanceRecord
from ...core.enums import PayBasis
from ...core.exceptions import ValidationError
from ...employees.model import Employee
from ..model import PayComponents
from ..policy import RatePolicy
from .base import PayrollCalculator
from .rate_calculators import DailyRateCalculator, HourlyRateCalculator, MonthlySalaryCalculator

_CALCULATORS = {
    PayBasis.DAILY: DailyRateCalculator(),
    PayBasis.HOURLY: HourlyRateCalculator(),
    PayBasis.MONTHLY: MonthlySalaryCalculator(),
}


def calculator_for(pay_basis: PayBasis) -> PayrollCalculator:
    try:
        return _CALCULATORS[PayBasis(pay_basis)]
    except (KeyError, ValueError):
        raise ValidationError(f"No payroll calculator for pay basis {pay_basis!r}")


def compute_payroll(employee: Employee, records: Sequence[AttendanceRecord], policy: RatePolicy) -> PayComponents:
    """Pure payroll computation for one employee over one period's records."""
    return calculator_for(employee.pay_basis).compute(employee, records, policy)
