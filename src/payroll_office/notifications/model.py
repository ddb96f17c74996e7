from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import NotificationCategory


@dataclass(frozen=True)
class NewNotification:
    employee_id: int
    title: str
    message: str
    category: NotificationCategory = NotificationCategory.INFO
