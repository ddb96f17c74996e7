from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = (
    "leave_id, employee_id, organization_id, leave_type, start_date, end_date, "
    "reason, status, created_at, decided_by, decided_at, admin_note"
)


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        organization_id=int(r["organization_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=from_db_datetime(r["created_at"]),
        decided_by=r.get("decided_by"),
        decided_at=from_db_datetime(r.get("decided_at")),
        admin_note=r.get("admin_note"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        organization_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, organization_id, leave_type, start_date, end_date, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,UTC_TIMESTAMP())
                """,
                (
                    int(employee_id),
                    int(organization_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY start_date DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_overlapping(
        self,
        employee_id: int,
        *,
        start: date,
        end: date,
        statuses: Iterable[RequestStatus],
    ) -> Sequence[LeaveRequest]:
        status_values = [s.value for s in statuses]
        if not status_values:
            return []
        placeholders = ",".join(["%s"] * len(status_values))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND start_date <= %s AND end_date >= %s
                  AND status IN ({placeholders})
                ORDER BY start_date ASC
                """,
                tuple([int(employee_id), end, start] + status_values),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_organization(
        self,
        organization_id: int,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        clauses = ["organization_id=%s"]
        params: list[object] = [int(organization_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        leave_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=UTC_TIMESTAMP(), admin_note=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    admin_note,
                    int(leave_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def count_by_status(self, *, organization_id: int) -> Mapping[RequestStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n
                FROM leave_requests
                WHERE organization_id=%s
                GROUP BY status
                """,
                (int(organization_id),),
            )
            return {RequestStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}
