from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.enums import PayslipStatus
from .model import PayComponents, Payslip


class PayslipRepository(Protocol):
    """Repository interface for Payslip.

    Status writes are conditional on the expected current status so two
    concurrent approvals cannot both succeed.
    """

    def create(
        self,
        *,
        employee_id: int,
        organization_id: int,
        month: int,
        year: int,
        components: PayComponents,
        generated_at: datetime,
    ) -> int:
        """Insert a pending payslip; DuplicateRecordError when the period is taken."""

        raise NotImplementedError

    def get(self, payslip_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def get_for_period(self, employee_id: int, *, month: int, year: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: int = 200) -> Sequence[Payslip]:
        raise NotImplementedError

    def list_for_period(self, organization_id: int, *, month: int, year: int) -> Sequence[Payslip]:
        raise NotImplementedError

    def transition(
        self,
        *,
        payslip_id: int,
        expected: PayslipStatus,
        target: PayslipStatus,
        at: datetime,
        decided_by: Optional[int] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_if_status(self, payslip_id: int, statuses: Iterable[PayslipStatus]) -> bool:
        raise NotImplementedError

    def totals_by_status(
        self, organization_id: int, *, month: int, year: int
    ) -> Mapping[PayslipStatus, Tuple[int, Decimal]]:
        """(count, sum of net salary) per status for one pay period."""

        raise NotImplementedError
