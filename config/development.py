import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_office"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(8 * 60 * 60)))

# Organization rows in organization_pay_policies override these field by field.
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
