from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import UserStatus, UserType
from .model import AcademyUser


class UserRepository(Protocol):
    """Repository interface for academy users.

    Note: services depend on this interface, not on a concrete table backend.
    """

    def list_all(self) -> Sequence[AcademyUser]:
        raise NotImplementedError

    def list_by_type(self, user_type: UserType, *, status: Optional[UserStatus] = None) -> Sequence[AcademyUser]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[AcademyUser]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[AcademyUser]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> AcademyUser:
        raise NotImplementedError

    def update(self, user_id: str, values: Mapping[str, Any]) -> Optional[AcademyUser]:
        raise NotImplementedError

    def delete(self, user_id: str) -> bool:
        raise NotImplementedError
