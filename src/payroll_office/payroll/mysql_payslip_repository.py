from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from ..core.enums import PayBasis, PayslipStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_db_datetime,
    load_json_column,
    to_db_datetime,
    to_decimal,
    unique_insert,
)
from .model import AttendanceSnapshot, PayComponents, PayLine, Payslip, money
from .repository import PayslipRepository

_COLUMNS = (
    "payslip_id, employee_id, organization_id, period_month, period_year, pay_basis, rate, "
    "days_worked, working_hours, overtime_hours, basic_salary, allowances, deductions, "
    "att_present, att_absent, att_late, att_half_day, status, generated_at, "
    "approved_by, approved_at, rejection_reason, paid_at"
)


def _lines_json(lines) -> str:
    return json.dumps([line.to_dict() for line in lines])


def _to_payslip(r: dict) -> Payslip:
    return Payslip(
        payslip_id=int(r["payslip_id"]),
        employee_id=int(r["employee_id"]),
        organization_id=int(r["organization_id"]),
        month=int(r["period_month"]),
        year=int(r["period_year"]),
        pay_basis=PayBasis(r["pay_basis"]),
        rate=money(to_decimal(r["rate"])),
        days_worked=int(r["days_worked"]),
        working_hours=money(to_decimal(r["working_hours"])),
        overtime_hours=money(to_decimal(r["overtime_hours"])),
        basic_salary=money(to_decimal(r["basic_salary"])),
        allowances=tuple(PayLine.from_dict(x) for x in load_json_column(r.get("allowances"))),
        deductions=tuple(PayLine.from_dict(x) for x in load_json_column(r.get("deductions"))),
        attendance=AttendanceSnapshot(
            present=int(r["att_present"]),
            absent=int(r["att_absent"]),
            late=int(r["att_late"]),
            half_day=int(r["att_half_day"]),
        ),
        status=PayslipStatus(r["status"]),
        generated_at=from_db_datetime(r["generated_at"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=from_db_datetime(r.get("approved_at")),
        rejection_reason=r.get("rejection_reason"),
        paid_at=from_db_datetime(r.get("paid_at")),
    )


class MySQLPayslipRepository(PayslipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        c = components
        with unique_insert("payslip for this period"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payslips(
                    employee_id, organization_id, period_month, period_year, pay_basis, rate,
                    days_worked, working_hours, overtime_hours, basic_salary, allowances, deductions,
                    net_salary, att_present, att_absent, att_late, att_half_day, status, generated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(organization_id),
                    int(month),
                    int(year),
                    c.pay_basis.value,
                    c.rate,
                    c.days_worked,
                    c.working_hours,
                    c.overtime_hours,
                    c.basic_salary,
                    _lines_json(c.allowances),
                    _lines_json(c.deductions),
                    c.net_salary,
                    c.attendance.present,
                    c.attendance.absent,
                    c.attendance.late,
                    c.attendance.half_day,
                    PayslipStatus.PENDING.value,
                    to_db_datetime(generated_at),
                ),
            )
            return int(cur.lastrowid)

    def get(self, payslip_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payslips WHERE payslip_id=%s", (int(payslip_id),))
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def get_for_period(self, employee_id: int, *, month: int, year: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payslips WHERE employee_id=%s AND period_month=%s AND period_year=%s",
                (int(employee_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def list_for_employee(self, employee_id: int, *, limit: int = 200) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payslips
                WHERE employee_id=%s
                ORDER BY period_year DESC, period_month DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_payslip(r) for r in fetchall(cur)]

    def list_for_period(self, organization_id: int, *, month: int, year: int) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payslips
                WHERE organization_id=%s AND period_month=%s AND period_year=%s
                ORDER BY employee_id ASC
                """,
                (int(organization_id), int(month), int(year)),
            )
            return [_to_payslip(r) for r in fetchall(cur)]

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
        sets = ["status=%s"]
        params: list[object] = [target.value]

        if target == PayslipStatus.PAID:
            sets.append("paid_at=%s")
            params.append(to_db_datetime(at))
        else:
            sets.extend(["approved_by=%s", "approved_at=%s"])
            params.extend([decided_by, to_db_datetime(at)])
            if target == PayslipStatus.REJECTED:
                sets.append("rejection_reason=%s")
                params.append(rejection_reason)

        params.extend([int(payslip_id), expected.value])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payslips SET {', '.join(sets)} WHERE payslip_id=%s AND status=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def delete_if_status(self, payslip_id: int, statuses: Iterable[PayslipStatus]) -> bool:
        values = [s.value for s in statuses]
        if not values:
            return False
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM payslips WHERE payslip_id=%s AND status IN ({placeholders})",
                (int(payslip_id), *values),
            )
            return cur.rowcount > 0

    def totals_by_status(
        self, organization_id: int, *, month: int, year: int
    ) -> Mapping[PayslipStatus, Tuple[int, Decimal]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n, COALESCE(SUM(net_salary), 0) AS amount
                FROM payslips
                WHERE organization_id=%s AND period_month=%s AND period_year=%s
                GROUP BY status
                """,
                (int(organization_id), int(month), int(year)),
            )
            return {
                PayslipStatus(r["status"]): (int(r["n"]), money(to_decimal(r["amount"])))
                for r in fetchall(cur)
            }
