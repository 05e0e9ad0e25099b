from __future__ import annotations

import logging
from dataclasses import asdict

from flask import Flask, jsonify, session

from ..common.datetime_utils import now_local
from ..common.web import current_user, error_response, json_error, login_required, payload
from ..container import Container
from ..core.exceptions import DomainError
from ..users.service import SessionUser
from .saved_accounts import SavedAccounts

logger = logging.getLogger(__name__)

AUTH_KEYS = ("user_id", "code", "name", "user_type")


def register(app: Flask, container: Container) -> None:
    def sign_in(code: str):
        s_user: SessionUser = container.auth_service.login(code)

        for key in AUTH_KEYS:
            session.pop(key, None)
        session["user_id"] = s_user.user_id
        session["code"] = s_user.code
        session["name"] = s_user.full_name
        session["user_type"] = s_user.user_type.value

        saved = SavedAccounts(session)
        saved.remember(code=s_user.code, full_name=s_user.full_name, user_type=s_user.user_type.value)
        saved.set_today_login(
            code=s_user.code,
            full_name=s_user.full_name,
            user_type=s_user.user_type.value,
            on=now_local().date(),
        )
        logger.info("login ok: %s (%s)", s_user.code, s_user.user_type.value)
        return jsonify({"user": s_user.to_dict()})

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        try:
            return sign_in(payload().get("code", ""))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("login failed")
            return json_error("System error during login", 500)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        # Saved accounts outlive the login itself.
        for key in AUTH_KEYS:
            session.pop(key, None)
        return jsonify({"success": True})

    @app.route("/api/auth/me", endpoint="api_me")
    @login_required
    def me():
        return jsonify({"user": current_user()})

    @app.route("/api/auth/saved-accounts", endpoint="api_saved_accounts")
    def saved_accounts():
        saved = SavedAccounts(session)
        return jsonify(
            {
                "accounts": [asdict(a) for a in saved.list()],
                "today_login": saved.today_login(now_local().date()),
            }
        )

    @app.route("/api/auth/saved-accounts/<code>", methods=["DELETE"], endpoint="api_remove_saved_account")
    def remove_saved_account(code: str):
        if not SavedAccounts(session).remove(code):
            return json_error("Account is not saved on this device", 404)
        return jsonify({"success": True})

    @app.route("/api/auth/quick-login", methods=["POST"], endpoint="api_quick_login")
    def quick_login():
        code = str(payload().get("code", "")).strip()
        if not SavedAccounts(session).find(code):
            return json_error("Account is not saved on this device", 404)
        try:
            return sign_in(code)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("quick login failed")
            return json_error("System error during login", 500)

    @app.route("/api/auth/return", methods=["POST"], endpoint="api_return_to_today")
    def return_to_today():
        today = SavedAccounts(session).today_login(now_local().date())
        if not today:
            return json_error("No login recorded today", 404)
        try:
            return sign_in(today["code"])
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("return to today's login failed")
            return json_error("System error during login", 500)
