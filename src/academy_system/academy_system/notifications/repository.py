from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.constants import NOTIFICATIONS_TABLE
from ..database.client import TableClient
from .model import NewNotification, Notification


class NotificationRepository(Protocol):
    def insert_many(self, items: Sequence[NewNotification], *, sent_at: Optional[str] = None) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError

    def list_recent(self, *, limit: int = 100) -> Sequence[Notification]:
        raise NotImplementedError


class TableNotificationRepository(NotificationRepository):
    def __init__(self, client: TableClient):
        self._client = client

    def insert_many(self, items: Sequence[NewNotification], *, sent_at: Optional[str] = None) -> int:
        if not items:
            return 0
        rows = [
            {
                "user_id": n.user_id,
                "type": n.type,
                "title": n.title,
                "message": n.message,
                "phone_number": n.phone_number,
                "status": n.status,
                "sent_at": sent_at,
            }
            for n in items
        ]
        return len(self._client.insert(NOTIFICATIONS_TABLE, rows))

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[Notification]:
        rows = self._client.select(
            NOTIFICATIONS_TABLE,
            eq={"user_id": user_id},
            order_by="created_at",
            descending=True,
            limit=limit,
        )
        return [Notification.from_row(r) for r in rows]

    def list_recent(self, *, limit: int = 100) -> Sequence[Notification]:
        rows = self._client.select(NOTIFICATIONS_TABLE, order_by="created_at", descending=True, limit=limit)
        return [Notification.from_row(r) for r in rows]
