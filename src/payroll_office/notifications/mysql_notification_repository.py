from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NewNotification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: NewNotification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(employee_id, title, message, category, created_at)
                VALUES(%s,%s,%s,%s,UTC_TIMESTAMP())
                """,
                (
                    int(notification.employee_id),
                    notification.title,
                    notification.message,
                    notification.category.value,
                ),
            )
            return int(cur.lastrowid)
