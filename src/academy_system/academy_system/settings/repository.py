from __future__ import annotations

from typing import Dict, Mapping, Optional, Protocol

from ..common.datetime_utils import utc_now_iso
from ..core.constants import SETTINGS_TABLE
from ..database.client import TableClient


class SettingsRepository(Protocol):
    def get_all(self) -> Dict[str, str]:
        raise NotImplementedError

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def upsert_many(self, values: Mapping[str, str]) -> None:
        raise NotImplementedError


class TableSettingsRepository(SettingsRepository):
    def __init__(self, client: TableClient):
        self._client = client

    def get_all(self) -> Dict[str, str]:
        return {row["key"]: row.get("value") or "" for row in self._client.select(SETTINGS_TABLE)}

    def get(self, key: str) -> Optional[str]:
        rows = self._client.select(SETTINGS_TABLE, eq={"key": key}, limit=1)
        return rows[0].get("value") if rows else None

    def upsert_many(self, values: Mapping[str, str]) -> None:
        if not values:
            return
        now = utc_now_iso()
        rows = [{"key": k, "value": str(v), "updated_at": now} for k, v in values.items()]
        self._client.upsert(SETTINGS_TABLE, rows, on_conflict="key")
