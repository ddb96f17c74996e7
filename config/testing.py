import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_office_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

TOKEN_MAX_AGE_SECONDS = 60 * 60

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

LEAVE_ALLOWANCES = {"casual": 10, "sick": 7, "annual": 20}
