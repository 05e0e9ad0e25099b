from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from ..core.constants import DEFAULT_USER_POLL_SECONDS
from ..core.enums import UserStatus, UserType
from ..core.exceptions import DataAccessError
from .model import AcademyUser
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserDirectory:
    """Polled snapshot of the full user table.

    The snapshot is re-read when older than `poll_seconds`. A refresh replaces
    the whole list; a failed refresh keeps the previous snapshot and is only
    logged at debug level.
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        poll_seconds: float = DEFAULT_USER_POLL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._users = users
        self._poll_seconds = float(poll_seconds)
        self._clock = clock
        self._snapshot: List[AcademyUser] = []
        self._loaded_at: Optional[float] = None
        self._lock = threading.Lock()

    def _stale(self) -> bool:
        return self._loaded_at is None or self._clock() - self._loaded_at >= self._poll_seconds

    def refresh(self) -> bool:
        try:
            users = list(self._users.list_all())
        except DataAccessError as e:
            logger.debug("user directory refresh failed: %s", e)
            with self._lock:
                self._loaded_at = self._clock()
            return False
        with self._lock:
            self._snapshot = users
            self._loaded_at = self._clock()
        return True

    def invalidate(self) -> None:
        with self._lock:
            self._loaded_at = None

    def all(self) -> List[AcademyUser]:
        if self._stale():
            self.refresh()
        with self._lock:
            return list(self._snapshot)

    def by_type(self, user_type: UserType, *, status: Optional[UserStatus] = None) -> List[AcademyUser]:
        return [
            u for u in self.all()
            if u.user_type == user_type and (status is None or u.status == status)
        ]

    def find(self, user_id: str) -> Optional[AcademyUser]:
        for user in self.all():
            if user.id == user_id:
                return user
        return None
