import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_office"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(8 * 60 * 60)))

DEFAULT_RATE_POLICY = {
    "housing_allowance_pct": os.getenv("HOUSING_ALLOWANCE_PCT", "0.10"),
    "transport_allowance_pct": os.getenv("TRANSPORT_ALLOWANCE_PCT", "0.05"),
    "tax_pct": os.getenv("TAX_PCT", "0.10"),
    "provident_fund_pct": os.getenv("PROVIDENT_FUND_PCT", "0.12"),
    "health_insurance_amount": os.getenv("HEALTH_INSURANCE_AMOUNT", "500"),
    "overtime_multiplier": os.getenv("OVERTIME_MULTIPLIER", "1.5"),
    "standard_hours_per_day": os.getenv("STANDARD_HOURS_PER_DAY", "8"),
    "days_per_month": os.getenv("DAYS_PER_MONTH", "30"),
}

LEAVE_ALLOWANCES = {
    "casual": int(os.getenv("LEAVE_CASUAL_DAYS", "10")),
    "sick": int(os.getenv("LEAVE_SICK_DAYS", "7")),
    "annual": int(os.getenv("LEAVE_ANNUAL_DAYS", "20")),
}
