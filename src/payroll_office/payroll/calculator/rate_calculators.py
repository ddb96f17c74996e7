from __future__ import annotations

from decimal import Decimal

from ...core.enums import PayBasis
from ..policy import RatePolicy
from .base import PayrollCalculator


class DailyRateCalculator(PayrollCalculator):
    """basic = days worked x daily rate."""

    pay_basis = PayBasis.DAILY

    def basic_salary(self, rate: Decimal, *, days_worked: int, hours_worked: Decimal, policy: RatePolicy) -> Decimal:
        return rate * days_worked

    def hourly_rate(self, rate: Decimal, policy: RatePolicy) -> Decimal:
        return rate / policy.standard_hours_per_day


class HourlyRateCalculator(PayrollCalculator):
    """basic = hours worked on present days x hourly rate."""

    pay_basis = PayBasis.HOURLY

    def basic_salary(self, rate: Decimal, *, days_worked: int, hours_worked: Decimal, policy: RatePolicy) -> Decimal:
        return rate * hours_worked

    def hourly_rate(self, rate: Decimal, policy: RatePolicy) -> Decimal:
        return rate


class MonthlySalaryCalculator(PayrollCalculator):
    """Fixed monthly salary, independent of attendance."""

    pay_basis = PayBasis.MONTHLY

    def basic_salary(self, rate: Decimal, *, days_worked: int, hours_worked: Decimal, policy: RatePolicy) -> Decimal:
        return rate

    def hourly_rate(self, rate: Decimal, policy: RatePolicy) -> Decimal:
        return rate / policy.days_per_month / policy.standard_hours_per_day
