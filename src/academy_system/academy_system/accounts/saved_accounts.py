"""Per-client "saved accounts" list and today's login.

Both live in the signed Flask session cookie, so they are per browser and
survive logout.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, List, MutableMapping, Optional

from ..common.datetime_utils import utc_now_iso
from ..core.constants import MAX_SAVED_ACCOUNTS

SAVED_ACCOUNTS_KEY = "saved_accounts"
TODAY_LOGIN_PREFIX = "todayLogin_"


@dataclass(frozen=True)
class SavedAccount:
    code: str
    full_name: str
    user_type: str
    last_login: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedAccount":
        return cls(
            code=str(data.get("code", "")),
            full_name=str(data.get("full_name", "")),
            user_type=str(data.get("user_type", "")),
            last_login=str(data.get("last_login", "")),
        )


class SavedAccounts:
    def __init__(self, store: MutableMapping[str, Any], *, limit: int = MAX_SAVED_ACCOUNTS):
        self._store = store
        self._limit = int(limit)

    def list(self) -> List[SavedAccount]:
        return [SavedAccount.from_dict(d) for d in self._store.get(SAVED_ACCOUNTS_KEY) or []]

    def _write(self, accounts: List[SavedAccount]) -> None:
        # Reassign so the session notices the change.
        self._store[SAVED_ACCOUNTS_KEY] = [asdict(a) for a in accounts]

    def remember(self, *, code: str, full_name: str, user_type: str) -> List[SavedAccount]:
        entry = SavedAccount(code=code, full_name=full_name, user_type=user_type, last_login=utc_now_iso())
        accounts = [entry] + [a for a in self.list() if a.code != code]
        accounts = accounts[: self._limit]
        self._write(accounts)
        return accounts

    def remove(self, code: str) -> bool:
        accounts = self.list()
        kept = [a for a in accounts if a.code != code]
        if len(kept) == len(accounts):
            return False
        self._write(kept)
        return True

    def find(self, code: str) -> Optional[SavedAccount]:
        for a in self.list():
            if a.code == code:
                return a
        return None

    @staticmethod
    def _today_key(on: date) -> str:
        return f"{TODAY_LOGIN_PREFIX}{on.isoformat()}"

    def set_today_login(self, *, code: str, full_name: str, user_type: str, on: date) -> None:
        # Only the current day's entry is kept.
        for key in [k for k in self._store.keys() if k.startswith(TODAY_LOGIN_PREFIX)]:
            self._store.pop(key, None)
        self._store[self._today_key(on)] = {"code": code, "full_name": full_name, "user_type": user_type}

    def today_login(self, on: date) -> Optional[Dict[str, str]]:
        return self._store.get(self._today_key(on))
