from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus, CheckMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime, unique_insert
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, employee_id, organization_id, work_date, "
    "check_in_time, check_in_method, check_out_time, check_out_method, "
    "status, working_hours, notes"
)


def _method(value) -> Optional[CheckMethod]:
    return CheckMethod(value) if value else None


def _to_record(r: dict) -> AttendanceRecord:
    hours = r.get("working_hours")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        organization_id=int(r["organization_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=from_db_datetime(r.get("check_in_time")),
        check_in_method=_method(r.get("check_in_method")),
        check_out_time=from_db_datetime(r.get("check_out_time")),
        check_out_method=_method(r.get("check_out_method")),
        working_hours=float(hours) if hours is not None else None,
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: int,
        organization_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime] = None,
        check_in_method: Optional[CheckMethod] = None,
        notes: Optional[str] = None,
    ) -> int:
        with unique_insert("attendance record"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, organization_id, work_date, check_in_time, check_in_method, status, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(organization_id),
                    work_date,
                    to_db_datetime(check_in_time),
                    check_in_method.value if check_in_method else None,
                    status.value,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def record_check_in(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        method: CheckMethod,
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_method=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (to_db_datetime(check_in_time), method.value, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        method: CheckMethod,
        working_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_method=%s, working_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (to_db_datetime(check_out_time), method.value, float(working_hours), int(attendance_id)),
            )
            return cur.rowcount > 0

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        working_hours: Optional[float],
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, working_hours=%s, notes=%s
                WHERE attendance_id=%s
                """,
                (
                    to_db_datetime(check_in_time),
                    to_db_datetime(check_out_time),
                    status.value,
                    working_hours,
                    notes,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def count_by_status(self, *, organization_id: int, work_date: date) -> Mapping[AttendanceStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n
                FROM attendance_records
                WHERE organization_id=%s AND work_date=%s
                GROUP BY status
                """,
                (int(organization_id), work_date),
            )
            return {AttendanceStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}

    def get_report_rows(
        self,
        *,
        organization_id: int,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.organization_id=%s", "ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [int(organization_id), start_date, end_date]

        if employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    e.employee_id, e.full_name,
                    ar.work_date, ar.status, ar.check_in_time, ar.check_out_time, ar.working_hours
                FROM attendance_records ar
                JOIN employees e ON e.employee_id = ar.employee_id
                WHERE {where}
                ORDER BY ar.work_date DESC, e.employee_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    employee_id=int(r["employee_id"]),
                    full_name=r["full_name"],
                    work_date=r["work_date"],
                    status=AttendanceStatus(r["status"]),
                    check_in_time=from_db_datetime(r.get("check_in_time")),
                    check_out_time=from_db_datetime(r.get("check_out_time")),
                    working_hours=float(r["working_hours"]) if r.get("working_hours") is not None else None,
                )
                for r in rows
            ]
