from __future__ import annotations

from dataclasses import dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_RATE_POLICY
from ..core.exceptions import ValidationError

_PCT_FIELDS = ("housing_allowance_pct", "transport_allowance_pct", "tax_pct", "provident_fund_pct")


def _check_known(names) -> None:
    unknown = set(names) - {f.name for f in fields(RatePolicy)}
    if unknown:
        raise ValidationError(f"Unknown rate policy fields: {', '.join(sorted(unknown))}")


def _as_decimal(name: str, value: Any) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid value for {name}: {value!r}")
    if not number.is_finite():
        raise ValidationError(f"Invalid value for {name}: {value!r}")
    return number


@dataclass(frozen=True)
class RatePolicy:
    """Payroll policy of an organization.

    Percentages are fractions of the basic salary (0.10 == 10%).
    """

    housing_allowance_pct: Decimal
    transport_allowance_pct: Decimal
    tax_pct: Decimal
    provident_fund_pct: Decimal
    health_insurance_amount: Decimal
    overtime_multiplier: Decimal
    standard_hours_per_day: Decimal
    days_per_month: Decimal

    def __post_init__(self):
        for name in _PCT_FIELDS:
            value = getattr(self, name)
            if not Decimal("0") <= value <= Decimal("1"):
                raise ValidationError(f"{name} must be between 0 and 1")
        if self.health_insurance_amount < 0:
            raise ValidationError("health_insurance_amount cannot be negative")
        if self.overtime_multiplier < 0:
            raise ValidationError("overtime_multiplier cannot be negative")
        if self.standard_hours_per_day <= 0 or self.days_per_month <= 0:
            raise ValidationError("standard_hours_per_day and days_per_month must be positive")

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]] = None) -> "RatePolicy":
        merged = dict(DEFAULT_RATE_POLICY)
        merged.update({k: v for k, v in (values or {}).items() if v is not None})
        _check_known(merged)
        return cls(**{name: _as_decimal(name, value) for name, value in merged.items()})

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "RatePolicy":
        """Copy with organization-level overrides applied (None values are ignored)."""
        if not overrides:
            return self
        changes = {k: _as_decimal(k, v) for k, v in overrides.items() if v is not None}
        _check_known(changes)
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {f.name: str(getattr(self, f.name)) for f in fields(self)}
