"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 31
DEFAULT_LIST_LIMIT = 200
DEFAULT_TOKEN_MAX_AGE_SECONDS = 8 * 60 * 60

# Fallback payroll policy, overridden by settings and organization policy rows.
DEFAULT_RATE_POLICY = {
    "housing_allowance_pct": "0.10",
    "transport_allowance_pct": "0.05",
    "tax_pct": "0.10",
    "provident_fund_pct": "0.12",
    "health_insurance_amount": "500",
    "overtime_multiplier": "1.5",
    "standard_hours_per_day": "8",
    "days_per_month": "30",
}

# Days per leave type per calendar year.
DEFAULT_LEAVE_ALLOWANCES = {
    "casual": 10,
    "sick": 7,
    "annual": 20,
}

MYSQL_DUPLICATE_KEY_ERRNO = 1062
