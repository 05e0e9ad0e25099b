from datetime import date

import pytest

from src.academy_system.academy_system.core.enums import UserStatus, UserType
from src.academy_system.academy_system.core.exceptions import NotFoundError, ValidationError


def test_add_user_generates_prefixed_code(container):
    user = container.user_service.add_user(user_type=UserType.STUDENT, full_name="Lina", phone="0501")
    assert user.code.startswith("S-")
    assert user.status == UserStatus.ACTIVE
    assert container.users_repo.get_by_code(user.code).id == user.id


def test_add_user_rejects_duplicate_code(container, trainer):
    with pytest.raises(ValidationError, match="already in use"):
        container.user_service.add_user(
            user_type=UserType.TRAINER, full_name="Other", phone="0502", code=trainer.code
        )


def test_add_user_requires_name_and_phone(container):
    with pytest.raises(ValidationError):
        container.user_service.add_user(user_type=UserType.PLAYER, full_name=" ", phone="0501")
    with pytest.raises(ValidationError):
        container.user_service.add_user(user_type=UserType.PLAYER, full_name="Ali", phone="")


def test_admin_accounts_cannot_be_created(container):
    with pytest.raises(ValidationError):
        container.user_service.add_user(user_type=UserType.ADMIN, full_name="Boss", phone="0500")


def test_suspend_then_reactivate_restores_code(container, player):
    original = player.code

    suspended = container.user_service.update_user(player.id, {"status": "suspended"})
    assert suspended.status == UserStatus.SUSPENDED
    assert suspended.code.startswith(original + "_DEACTIVATED_")

    active = container.user_service.update_user(player.id, {"status": "active"})
    assert active.status == UserStatus.ACTIVE
    assert active.code == original


def test_update_rejects_code_taken_by_someone_else(container, player, trainer):
    with pytest.raises(ValidationError, match="already in use"):
        container.user_service.update_user(player.id, {"code": trainer.code})


def test_directory_sees_new_users_immediately(container, player):
    ids = [u.id for u in container.user_service.list_users(user_type=UserType.PLAYER)]
    assert ids == [player.id]


def test_renew_subscription(container, player):
    renewed = container.user_service.renew_subscription(player.id, days=90, start_date=date(2026, 5, 1))
    assert renewed.subscription_days == 90
    assert renewed.subscription_end_date == date(2026, 7, 30)


def test_renew_subscription_rejects_unknown_period(container, player):
    with pytest.raises(ValidationError):
        container.user_service.renew_subscription(player.id, days=45)


def test_renew_subscription_only_for_players(container, trainer):
    with pytest.raises(ValidationError):
        container.user_service.renew_subscription(trainer.id, days=30)


def test_delete_user(container, player):
    container.user_service.delete_user(player.id)
    with pytest.raises(NotFoundError):
        container.user_service.get_user(player.id)


def test_suspending_again_keeps_existing_suffix(container, player):
    suspended = container.user_service.update_user(player.id, {"status": "suspended"})
    inactive = container.user_service.update_user(player.id, {"status": "inactive"})
    again = container.user_service.update_user(player.id, {"status": "inactive"})

    assert inactive.code.startswith(player.code + "_DEACTIVATED_")
    assert inactive.code.count("_DEACTIVATED_") == 1
    assert again.code == inactive.code
    assert suspended.status == UserStatus.SUSPENDED
