from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from ..common.datetime_utils import utc_now_iso
from ..core.enums import NotificationType
from ..core.exceptions import DataAccessError
from ..database.client import to_wire
from .model import NewNotification, Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Write-only notification outbox.

    Inserts are fire-and-forget: a failed insert is logged and reported as a
    False/0 result, never raised to the caller. SMS delivery is a stub that
    only logs the intent.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        type: Union[NotificationType, str],
        title: str,
        message: str,
        user_id: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> bool:
        item = NewNotification(
            type=type, title=title, message=message, user_id=user_id, phone_number=phone_number
        )
        return self.notify_many([item]) == 1

    def notify_many(self, items: Sequence[NewNotification]) -> int:
        if not items:
            return 0
        try:
            return self._notifications.insert_many(items, sent_at=utc_now_iso())
        except DataAccessError as e:
            logger.error("failed to store %d notification(s): %s", len(items), e)
            return 0

    def send_sms(
        self,
        *,
        phone: Optional[str],
        message: str,
        title: str,
        type: Union[NotificationType, str] = NotificationType.GENERAL,
        user_id: Optional[str] = None,
    ) -> bool:
        """Record an SMS notice and hand it to the (stubbed) SMS gateway."""
        logger.info("sending notification type=%s title=%r user_id=%s", to_wire(type), title, user_id)
        stored = self.notify(
            type=type, title=title, message=message, user_id=user_id, phone_number=phone
        )
        # No SMS provider is wired in; the outbox row is the record of delivery.
        logger.info("SMS to %s: %s - %s", phone or "-", title, message)
        return stored

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id, limit=limit)

    def list_recent(self, *, limit: int = 100) -> Sequence[Notification]:
        return self._notifications.list_recent(limit=limit)
