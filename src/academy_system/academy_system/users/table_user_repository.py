from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..common.datetime_utils import as_date, as_datetime, utc_now_iso
from ..core.constants import USERS_TABLE
from ..core.enums import UserStatus, UserType
from ..database.client import TableClient
from .model import AcademyUser
from .repository import UserRepository


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None and value != "" else None


def _opt_float(value: Any) -> Optional[float]:
    return float(value) if value is not None and value != "" else None


def user_from_row(row: Dict[str, Any]) -> AcademyUser:
    return AcademyUser(
        id=str(row["id"]),
        code=row["code"],
        full_name=row.get("full_name") or "",
        phone=row.get("phone") or "",
        user_type=UserType(row["user_type"]),
        status=UserStatus(row.get("status") or UserStatus.ACTIVE.value),
        age=_opt_int(row.get("age")),
        email=row.get("email"),
        residential_area=row.get("residential_area"),
        address=row.get("address"),
        sport_type=row.get("sport_type"),
        learning_goals=row.get("learning_goals"),
        parent_phone=row.get("parent_phone"),
        guardian_phone=row.get("guardian_phone"),
        subscription_duration=row.get("subscription_duration"),
        subscription_start_date=as_date(row.get("subscription_start_date")),
        subscription_days=_opt_int(row.get("subscription_days")),
        salary=_opt_float(row.get("salary")),
        job_position=row.get("job_position"),
        created_at=as_datetime(row.get("created_at")),
        updated_at=as_datetime(row.get("updated_at")),
    )


class TableUserRepository(UserRepository):
    def __init__(self, client: TableClient):
        self._client = client

    def list_all(self) -> Sequence[AcademyUser]:
        rows = self._client.select(USERS_TABLE, order_by="created_at", descending=True)
        return [user_from_row(r) for r in rows]

    def list_by_type(self, user_type: UserType, *, status: Optional[UserStatus] = None) -> Sequence[AcademyUser]:
        eq: Dict[str, Any] = {"user_type": user_type}
        if status is not None:
            eq["status"] = status
        rows = self._client.select(USERS_TABLE, eq=eq, order_by="full_name")
        return [user_from_row(r) for r in rows]

    def get_by_id(self, user_id: str) -> Optional[AcademyUser]:
        rows = self._client.select(USERS_TABLE, eq={"id": user_id}, limit=1)
        return user_from_row(rows[0]) if rows else None

    def get_by_code(self, code: str) -> Optional[AcademyUser]:
        rows = self._client.select(USERS_TABLE, eq={"code": code}, limit=1)
        return user_from_row(rows[0]) if rows else None

    def create(self, values: Mapping[str, Any]) -> AcademyUser:
        rows = self._client.insert(USERS_TABLE, [dict(values)])
        return user_from_row(rows[0])

    def update(self, user_id: str, values: Mapping[str, Any]) -> Optional[AcademyUser]:
        changes = dict(values)
        changes["updated_at"] = utc_now_iso()
        rows = self._client.update(USERS_TABLE, changes, eq={"id": user_id})
        return user_from_row(rows[0]) if rows else None

    def delete(self, user_id: str) -> bool:
        return self._client.delete(USERS_TABLE, eq={"id": user_id}) > 0
