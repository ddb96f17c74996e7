from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .notifications.dispatch import NotificationPayslipDispatcher, PayslipDispatcher
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.mysql_payslip_repository import MySQLPayslipRepository
from .payroll.policy import RatePolicy
from .payroll.policy_repository import MySQLPolicyRepository, PolicyRepository
from .payroll.repository import PayslipRepository
from .payroll.service import PayslipService
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    payslip_repo: PayslipRepository
    notification_repo: NotificationRepository
    policy_repo: Optional[PolicyRepository]

    notification_service: NotificationService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payslip_service: PayslipService
    report_service: ReportService


def assemble_container(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    payslip_repo: PayslipRepository,
    notification_repo: NotificationRepository,
    policy_repo: Optional[PolicyRepository] = None,
    dispatcher: Optional[PayslipDispatcher] = None,
    rate_policy: Optional[Mapping[str, Any]] = None,
    leave_allowances: Optional[Mapping[str, int]] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over whatever repositories are given (MySQL or in-memory)."""
    notification_service = NotificationService(notification_repo)
    attendance_service = AttendanceService(attendance_repo, employees_repo, leave_repo)
    leave_service = LeaveService(
        leave_repo,
        employees_repo,
        allowances=leave_allowances,
        notifications=notification_service,
    )
    payslip_service = PayslipService(
        payslip_repo,
        employees_repo,
        attendance_repo,
        policy=RatePolicy.from_mapping(rate_policy),
        policies=policy_repo,
        notifications=notification_service,
        dispatcher=dispatcher or NotificationPayslipDispatcher(notification_service),
    )
    report_service = ReportService(employees_repo, attendance_repo, leave_repo, payslip_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payslip_repo=payslip_repo,
        notification_repo=notification_repo,
        policy_repo=policy_repo,
        notification_service=notification_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payslip_service=payslip_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    rate_policy: Optional[Mapping[str, Any]] = None,
    leave_allowances: Optional[Mapping[str, int]] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble_container(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        payslip_repo=MySQLPayslipRepository(conn),
        notification_repo=MySQLNotificationRepository(conn),
        policy_repo=MySQLPolicyRepository(conn),
        rate_policy=rate_policy,
        leave_allowances=leave_allowances,
        conn=conn,
    )
