from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, EmploymentType, PayBasis
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = (
    "employee_id, user_id, organization_id, full_name, email, "
    "employment_type, pay_basis, base_rate, status"
)


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        user_id=int(r["user_id"]),
        organization_id=int(r["organization_id"]),
        full_name=r["full_name"],
        email=r["email"],
        employment_type=EmploymentType(r["employment_type"]),
        pay_basis=PayBasis(r["pay_basis"]),
        base_rate=to_decimal(r["base_rate"]),
        status=EmployeeStatus(r["status"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active_for_organization(self, organization_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE organization_id=%s AND status=%s
                ORDER BY employee_id ASC
                """,
                (int(organization_id), EmployeeStatus.ACTIVE.value),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def count_active_for_organization(self, organization_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM employees WHERE organization_id=%s AND status=%s",
                (int(organization_id), EmployeeStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
