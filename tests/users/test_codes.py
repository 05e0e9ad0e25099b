import random
from datetime import datetime

import pytest

from src.academy_system.academy_system.core.enums import UserStatus, UserType
from src.academy_system.academy_system.core.exceptions import ValidationError
from src.academy_system.academy_system.users.codes import (
    base_code,
    code_for_status,
    deactivate_code,
    generate_admin_code,
    generate_code,
    is_deactivated,
    reactivate_code,
)


@pytest.mark.parametrize(
    "user_type,prefix",
    [
        (UserType.PLAYER, "P-"),
        (UserType.TRAINER, "T-"),
        (UserType.STUDENT, "S-"),
        (UserType.EMPLOYEE, "E-"),
    ],
)
def test_generated_code_has_type_prefix_and_six_digits(user_type, prefix):
    code = generate_code(user_type, rng=random.Random(7))
    assert code.startswith(prefix)
    digits = code[len(prefix):]
    assert len(digits) == 6 and digits.isdigit()


def test_admin_codes_are_not_generated_per_user():
    with pytest.raises(ValidationError):
        generate_code(UserType.ADMIN)


def test_admin_code_keeps_fixed_prefix():
    code = generate_admin_code(rng=random.Random(3))
    assert code.startswith("V9-912")
    assert len(code) == len("V9-912") + 3


def test_deactivation_suffix_restores_exact_code():
    at = datetime(2026, 3, 1, 10, 30)
    suspended = deactivate_code("P-123456", at=at)

    assert suspended.startswith("P-123456_DEACTIVATED_")
    assert is_deactivated(suspended)
    assert reactivate_code(suspended) == "P-123456"


def test_deactivating_twice_does_not_stack_suffixes():
    first = deactivate_code("S-654321", at=datetime(2026, 1, 1))
    second = deactivate_code(first, at=datetime(2026, 2, 1))

    assert second.count("_DEACTIVATED_") == 1
    assert base_code(second) == "S-654321"


def test_code_for_status():
    at = datetime(2026, 3, 1)
    assert code_for_status("E-111111", UserStatus.INACTIVE, at=at).startswith("E-111111_DEACTIVATED_")
    assert code_for_status("E-111111_DEACTIVATED_1", UserStatus.ACTIVE, at=at) == "E-111111"
