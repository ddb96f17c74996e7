from __future__ import annotations

import calendar
import logging
from typing import TYPE_CHECKING

from ..core.enums import NotificationCategory, RequestStatus
from ..core.exceptions import DependencyFailure
from .model import NewNotification
from .repository import NotificationRepository

if TYPE_CHECKING:
    from ..leave.model import LeaveRequest
    from ..payroll.model import Payslip

logger = logging.getLogger(__name__)


def period_label(month: int, year: int) -> str:
    return f"{calendar.month_name[month]} {year}"


class NotificationService:
    """Writes in-app notifications for employees.

    Every failure is re-raised as DependencyFailure so callers can treat
    notifications as best-effort.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def _send(self, notification: NewNotification) -> int:
        try:
            notification_id = self._notifications.create(notification)
        except Exception as e:
            raise DependencyFailure(f"notification for employee {notification.employee_id} failed: {e}") from e
        logger.debug("notification %s queued for employee %s", notification_id, notification.employee_id)
        return notification_id

    def notify_payslip_generated(self, payslip: "Payslip") -> int:
        return self._send(
            NewNotification(
                employee_id=payslip.employee_id,
                title="New Payslip Available",
                message=f"Your payslip for {period_label(payslip.month, payslip.year)} has been generated",
                category=NotificationCategory.INFO,
            )
        )

    def notify_payslip_approved(self, payslip: "Payslip") -> int:
        return self._send(
            NewNotification(
                employee_id=payslip.employee_id,
                title="Payslip Approved",
                message=f"Your payslip for {period_label(payslip.month, payslip.year)} is now available",
                category=NotificationCategory.SUCCESS,
            )
        )

    def notify_leave_decision(self, leave: "LeaveRequest") -> int:
        category = NotificationCategory.SUCCESS if leave.status == RequestStatus.APPROVED else NotificationCategory.ERROR
        return self._send(
            NewNotification(
                employee_id=leave.employee_id,
                title="Leave Application Update",
                message=(
                    f"Your {leave.leave_type.value} leave from {leave.start_date.isoformat()} "
                    f"to {leave.end_date.isoformat()} has been {leave.status.value}"
                ),
                category=category,
            )
        )
