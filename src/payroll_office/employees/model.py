from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import EmployeeStatus, EmploymentType, PayBasis


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Employee CRUD lives outside this service; the core only reads
    employees to attribute attendance and compute pay.
    """

    employee_id: int
    user_id: int
    organization_id: int
    full_name: str
    email: str
    employment_type: EmploymentType
    pay_basis: PayBasis
    base_rate: Decimal
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
