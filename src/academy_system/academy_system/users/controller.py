from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_int, require_enum
from ..common.web import error_response, json_error, payload, roles_required
from ..container import Container
from ..core.constants import RENEWAL_OPTIONS
from ..core.enums import UserStatus, UserType
from ..core.exceptions import DomainError, ValidationError
from .codes import generate_code

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", endpoint="api_list_users")
    @roles_required(UserType.ADMIN, UserType.TRAINER, UserType.EMPLOYEE)
    def list_users():
        try:
            user_type = request.args.get("type")
            status = request.args.get("status")
            users = container.user_service.list_users(
                user_type=require_enum(UserType, user_type, "user type") if user_type else None,
                status=require_enum(UserStatus, status, "status") if status else None,
            )
            return jsonify({"users": [u.to_dict() for u in users]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("listing users failed")
            return json_error("System error while loading users", 500)

    @app.route("/api/users/<user_id>", endpoint="api_get_user")
    @roles_required(UserType.ADMIN, UserType.TRAINER, UserType.EMPLOYEE)
    def get_user(user_id: str):
        try:
            return jsonify({"user": container.user_service.get_user(user_id).to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading user %s failed", user_id)
            return json_error("System error while loading user", 500)

    @app.route("/api/users", methods=["POST"], endpoint="api_add_user")
    @roles_required(UserType.ADMIN)
    def add_user():
        data = payload()
        try:
            user_type = require_enum(UserType, data.get("user_type"), "user type")
            profile = {k: v for k, v in data.items() if k not in ("user_type", "full_name", "phone", "code")}
            user = container.user_service.add_user(
                user_type=user_type,
                full_name=data.get("full_name", ""),
                phone=data.get("phone", ""),
                code=data.get("code"),
                **profile,
            )
            return jsonify({"user": user.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("adding user failed")
            return json_error("System error while adding user", 500)

    @app.route("/api/users/<user_id>", methods=["PATCH"], endpoint="api_update_user")
    @roles_required(UserType.ADMIN)
    def update_user(user_id: str):
        try:
            user = container.user_service.update_user(user_id, payload())
            return jsonify({"user": user.to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("updating user %s failed", user_id)
            return json_error("System error while updating user", 500)

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="api_delete_user")
    @roles_required(UserType.ADMIN)
    def delete_user(user_id: str):
        try:
            container.user_service.delete_user(user_id)
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("deleting user %s failed", user_id)
            return json_error("System error while deleting user", 500)

    @app.route("/api/users/<user_id>/renew", methods=["POST"], endpoint="api_renew_user")
    @roles_required(UserType.ADMIN)
    def renew_user(user_id: str):
        data = payload()
        try:
            days = optional_int(data.get("days"), "days")
            if days is None:
                raise ValidationError("days is required")
            start = parse_iso_date(data["start_date"]) if data.get("start_date") else None
            user = container.user_service.renew_subscription(user_id, days=days, start_date=start)
            return jsonify({"user": user.to_dict(), "price": RENEWAL_OPTIONS[days]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("renewing user %s failed", user_id)
            return json_error("System error while renewing subscription", 500)

    @app.route("/api/users/expired", endpoint="api_expired_players")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def expired_players():
        try:
            return jsonify({"users": [u.to_dict() for u in container.user_service.expired_players()]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("listing expired subscriptions failed")
            return json_error("System error while loading users", 500)

    @app.route("/api/users/renewal-options", endpoint="api_renewal_options")
    @roles_required(UserType.ADMIN)
    def renewal_options():
        return jsonify({"options": [{"days": d, "price": p} for d, p in RENEWAL_OPTIONS.items()]})

    @app.route("/api/users/generate-code", methods=["POST"], endpoint="api_generate_code")
    @roles_required(UserType.ADMIN)
    def generate_user_code():
        try:
            user_type = require_enum(UserType, payload().get("user_type"), "user type")
            return jsonify({"code": generate_code(user_type)})
        except DomainError as e:
            return error_response(e)
