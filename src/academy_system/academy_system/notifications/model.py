from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ..common.datetime_utils import as_datetime
from ..core.enums import NotificationType


@dataclass(frozen=True)
class NewNotification:
    """Row to be written into the notification outbox.

    `type` is usually a NotificationType, but any string is stored as given.
    """

    type: Union[NotificationType, str]
    title: str
    message: str
    user_id: Optional[str] = None
    phone_number: Optional[str] = None
    status: str = "sent"


@dataclass(frozen=True)
class Notification:
    id: str
    type: str
    title: str
    message: str
    user_id: Optional[str]
    phone_number: Optional[str]
    status: Optional[str]
    sent_at: Optional[datetime]
    created_at: Optional[datetime]

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Notification":
        # `type` stays a plain string: the outbox also holds types written by other clients.
        return cls(
            id=str(row["id"]),
            type=row.get("type") or NotificationType.GENERAL.value,
            title=row.get("title") or "",
            message=row.get("message") or "",
            user_id=row.get("user_id"),
            phone_number=row.get("phone_number"),
            status=row.get("status"),
            sent_at=as_datetime(row.get("sent_at")),
            created_at=as_datetime(row.get("created_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "user_id": self.user_id,
            "phone_number": self.phone_number,
            "status": self.status,
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
