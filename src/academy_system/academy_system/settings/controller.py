from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.web import error_response, json_error, payload, roles_required
from ..container import Container
from ..core.constants import ADMIN_CODE_KEY, MONTHLY_REPORT_KEY_PREFIX, SAVED_ATTENDANCE_KEY_PREFIX
from ..core.enums import UserType
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

# Report blobs are stored as settings but served by the reports API.
_HIDDEN_PREFIXES = (SAVED_ATTENDANCE_KEY_PREFIX, MONTHLY_REPORT_KEY_PREFIX)


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/maintenance", endpoint="api_maintenance_status")
    def maintenance_status():
        try:
            svc = container.settings_service
            return jsonify({"maintenance_mode": svc.is_maintenance_mode(), "message": svc.maintenance_message()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("reading maintenance status failed")
            return json_error("System error while reading settings", 500)

    @app.route("/api/settings/maintenance", methods=["POST"], endpoint="api_set_maintenance")
    @roles_required(UserType.ADMIN)
    def set_maintenance():
        data = payload()
        try:
            change = container.settings_service.set_maintenance(
                enabled=_as_bool(data.get("enabled")),
                message=data.get("message"),
            )
            return jsonify(
                {
                    "maintenance_mode": change.enabled,
                    "message": change.message,
                    "notifications_sent": change.notifications_sent,
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("toggling maintenance failed")
            return json_error("System error while updating maintenance mode", 500)

    @app.route("/api/settings", endpoint="api_settings")
    @roles_required(UserType.ADMIN)
    def all_settings():
        try:
            values = container.settings_service.get_all(refresh=True)
            visible = {k: v for k, v in values.items() if not k.startswith(_HIDDEN_PREFIXES)}
            return jsonify({"settings": visible})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading settings failed")
            return json_error("System error while reading settings", 500)

    @app.route("/api/settings/<key>", methods=["PUT"], endpoint="api_update_setting")
    @roles_required(UserType.ADMIN)
    def update_setting(key: str):
        value = payload().get("value")
        try:
            if value is None:
                return json_error("value is required", 400)
            if key == ADMIN_CODE_KEY:
                container.settings_service.update_admin_code(str(value))
            else:
                container.settings_service.update(key, str(value))
            return jsonify({"key": key, "value": container.settings_service.get(key)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("updating setting %s failed", key)
            return json_error("System error while saving the setting", 500)

    @app.route("/api/settings/admin-code", methods=["PUT"], endpoint="api_update_admin_code")
    @roles_required(UserType.ADMIN)
    def update_admin_code():
        try:
            code = container.settings_service.update_admin_code(str(payload().get("code", "")))
            return jsonify({"admin_code": code})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("updating admin code failed")
            return json_error("System error while saving the admin code", 500)

    @app.route("/api/settings/admin-code/generate", methods=["POST"], endpoint="api_generate_admin_code")
    @roles_required(UserType.ADMIN)
    def generate_admin_code():
        try:
            return jsonify({"admin_code": container.settings_service.generate_admin_code()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("generating admin code failed")
            return json_error("System error while generating the admin code", 500)
