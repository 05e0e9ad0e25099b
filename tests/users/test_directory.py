from __future__ import annotations

import pytest

from src.academy_system.academy_system.core.enums import UserType
from src.academy_system.academy_system.core.exceptions import DataAccessError
from src.academy_system.academy_system.users.directory import UserDirectory
from src.academy_system.academy_system.users.model import AcademyUser


class FlakyUsers:
    def __init__(self, users):
        self.users = users
        self.error = None

    def list_all(self):
        if self.error is not None:
            raise self.error
        return list(self.users)


def _user(user_id: str) -> AcademyUser:
    return AcademyUser(id=user_id, code=f"P-{user_id}", full_name=user_id, phone="050", user_type=UserType.PLAYER)


def test_backend_failure_keeps_previous_snapshot():
    repo = FlakyUsers([_user("1")])
    directory = UserDirectory(repo, poll_seconds=0.0)
    assert [u.id for u in directory.all()] == ["1"]

    repo.error = DataAccessError("timeout")
    assert directory.refresh() is False
    assert [u.id for u in directory.all()] == ["1"]


def test_non_backend_errors_propagate():
    repo = FlakyUsers([_user("1")])
    repo.error = KeyError("id")
    directory = UserDirectory(repo, poll_seconds=0.0)

    with pytest.raises(KeyError):
        directory.all()
