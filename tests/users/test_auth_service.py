from datetime import date, datetime

import pytest

from src.academy_system.academy_system.core.enums import UserType
from src.academy_system.academy_system.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.academy_system.academy_system.users.service import AuthService


def _auth(container, *, today: date) -> AuthService:
    return AuthService(
        container.users_repo,
        container.settings_service,
        backup_admin_code="V9-912999",
        clock=lambda: datetime(today.year, today.month, today.day, 9, 0),
    )


def test_default_admin_code_logs_in_without_user_row(container):
    s_user = container.auth_service.login("V9-912000")
    assert s_user.user_type == UserType.ADMIN
    assert s_user.user_id is None


def test_backup_admin_code_always_works(container):
    container.settings_service.update_admin_code("V9-912123")
    assert container.auth_service.login("V9-912999").user_type == UserType.ADMIN
    with pytest.raises(AuthenticationError):
        container.auth_service.login("V9-912000")


def test_unknown_code_is_rejected(container):
    with pytest.raises(AuthenticationError, match="Invalid code"):
        container.auth_service.login("P-000000")


def test_blank_code_is_a_validation_error(container):
    with pytest.raises(ValidationError):
        container.auth_service.login("   ")


def test_player_login_returns_session_user(container, player):
    s_user = _auth(container, today=date(2026, 3, 10)).login(player.code)
    assert s_user.user_id == player.id
    assert s_user.user_type == UserType.PLAYER
    assert s_user.to_dict()["user_type"] == "player"


def test_expired_subscription_blocks_player(container, player):
    # 2026-03-01 + 30 days = 2026-03-31; expired from that day on.
    assert _auth(container, today=date(2026, 3, 30)).login(player.code).user_id == player.id
    with pytest.raises(AuthenticationError, match="expired"):
        _auth(container, today=date(2026, 4, 1)).login(player.code)


def test_subscription_end_date_itself_is_expired(container, player):
    assert player.subscription_end_date == date(2026, 3, 31)
    with pytest.raises(AuthenticationError, match="expired"):
        _auth(container, today=date(2026, 3, 31)).login(player.code)


def test_suspended_user_cannot_log_in_with_old_code(container, player):
    container.user_service.update_user(player.id, {"status": "suspended"})
    with pytest.raises(AuthenticationError, match="Invalid code"):
        _auth(container, today=date(2026, 3, 10)).login(player.code)


def test_maintenance_blocks_everyone_but_admin(container, trainer):
    container.settings_service.set_maintenance(enabled=True, message="Pitch renovation")

    with pytest.raises(AuthorizationError, match="Pitch renovation"):
        container.auth_service.login(trainer.code)
    assert container.auth_service.login("V9-912000").user_type == UserType.ADMIN
