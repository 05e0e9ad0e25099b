"""Login code helpers.

A user's code is `<prefix><6 digits>`. Suspending or deactivating a user
appends `_DEACTIVATED_<epoch-ms>` so the old code stops matching at login;
reactivation strips the suffix again.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import epoch_millis
from ..core.constants import ADMIN_CODE_PREFIX, CODE_PREFIXES, DEACTIVATED_MARKER
from ..core.enums import UserStatus, UserType
from ..core.exceptions import ValidationError


def generate_code(user_type: UserType, *, rng: Optional[random.Random] = None) -> str:
    prefix = CODE_PREFIXES.get(user_type)
    if prefix is None:
        raise ValidationError(f"Codes are not generated for {user_type.value} accounts")
    rng = rng or random.Random()
    return f"{prefix}{rng.randint(100000, 999999)}"


def generate_admin_code(*, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return f"{ADMIN_CODE_PREFIX}{rng.randint(0, 999):03d}"


def base_code(code: str) -> str:
    return code.split(DEACTIVATED_MARKER)[0]


def is_deactivated(code: str) -> bool:
    return DEACTIVATED_MARKER in code


def deactivate_code(code: str, *, at: datetime) -> str:
    return f"{base_code(code)}{DEACTIVATED_MARKER}{epoch_millis(at)}"


def reactivate_code(code: str) -> str:
    return base_code(code)


def code_for_status(code: str, status: UserStatus, *, at: datetime) -> str:
    """Code a user should carry after moving to `status`."""
    if status == UserStatus.ACTIVE:
        return reactivate_code(code)
    return deactivate_code(code, at=at)
