from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried by the bearer token."""

    ADMIN = "admin"
    CLIENT = "client"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"


class CheckMethod(str, Enum):
    MANUAL = "manual"
    QR = "qr"


class EmploymentType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"
    INTERN = "intern"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PayBasis(str, Enum):
    """How an employee's base rate is expressed."""

    DAILY = "daily"
    HOURLY = "hourly"
    MONTHLY = "monthly"


class LeaveType(str, Enum):
    CASUAL = "casual"
    SICK = "sick"
    ANNUAL = "annual"


class RequestStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayslipStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class NotificationCategory(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
