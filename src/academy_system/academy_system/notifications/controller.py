from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.validators import optional_int
from ..common.web import error_response, json_error, login_required
from ..container import Container
from ..core.enums import NotificationType, UserType
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/functions/send-notification", methods=["POST"], endpoint="send_notification")
    def send_notification():
        """Notification function: store the notice and hand it to the SMS stub.

        Body: {phone, message, title, type="general", user_id=null}.
        """
        try:
            data = request.get_json(force=True)
            if not isinstance(data, dict):
                raise ValueError("Request body must be a JSON object")
            container.notification_service.send_sms(
                phone=data.get("phone"),
                message=data.get("message") or "",
                title=data.get("title") or "",
                type=str(data.get("type") or NotificationType.GENERAL.value),
                user_id=data.get("user_id"),
            )
            return jsonify({"success": True, "message": "Notification sent"})
        except Exception as e:
            logger.error("send-notification failed: %s", e)
            return jsonify({"error": str(e)}), 500

    @app.route("/api/notifications", endpoint="api_notifications")
    @login_required
    def my_notifications():
        try:
            limit = optional_int(request.args.get("limit"), "limit") or 50
            user_id = session.get("user_id")
            if session.get("user_type") == UserType.ADMIN.value and not user_id:
                items = container.notification_service.list_recent(limit=limit)
            elif user_id:
                items = container.notification_service.list_for_user(user_id, limit=limit)
            else:
                items = []
            return jsonify({"notifications": [n.to_dict() for n in items]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading notifications failed")
            return json_error("System error while loading notifications", 500)
