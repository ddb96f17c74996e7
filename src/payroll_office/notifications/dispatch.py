from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .service import NotificationService

if TYPE_CHECKING:
    from ..employees.model import Employee
    from ..payroll.model import Payslip


class PayslipDispatcher(Protocol):
    """Delivers an approved payslip to its employee (PDF/email live behind this)."""

    def dispatch(self, payslip: "Payslip", employee: "Employee") -> None:
        raise NotImplementedError


class NotificationPayslipDispatcher(PayslipDispatcher):
    """Default dispatcher: tells the employee the payslip is available."""

    def __init__(self, notifications: NotificationService):
        self._notifications = notifications

    def dispatch(self, payslip: "Payslip", employee: "Employee") -> None:
        self._notifications.notify_payslip_approved(payslip)
