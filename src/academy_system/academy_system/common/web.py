from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import jsonify, request, session

from ..core.enums import UserType
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DataAccessError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (DataAccessError, 502),
)


def json_error(message: str, status: int):
    return jsonify({"error": message}), status


def error_response(e: DomainError):
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(e, cls):
            if status >= 500:
                logger.error("backend error on %s %s: %s", request.method, request.path, e)
            return json_error(str(e), status)
    return json_error(str(e) or "Request failed", 400)


def payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def current_user() -> Optional[Dict[str, Any]]:
    if "user_type" not in session:
        return None
    return {
        "user_id": session.get("user_id"),
        "code": session.get("code"),
        "full_name": session.get("name"),
        "user_type": session.get("user_type"),
    }


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_type" not in session:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*user_types: UserType):
    allowed = {t.value for t in user_types}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_type" not in session:
                return json_error("Please log in to continue", 401)
            if session.get("user_type") not in allowed:
                return json_error("You do not have permission for this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
