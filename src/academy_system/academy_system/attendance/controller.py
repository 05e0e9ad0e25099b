from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_int, require_enum, require_non_empty
from ..common.web import error_response, json_error, login_required, payload, roles_required
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import STAFF_TYPES, AttendanceStatus, UserType
from ..core.exceptions import AuthorizationError, DomainError

logger = logging.getLogger(__name__)

MARKERS = (UserType.ADMIN, UserType.TRAINER)


def register(app: Flask, container: Container) -> None:
    def _date_arg(value):
        return parse_iso_date(value) if value else now_local().date()

    def _ensure_can_view(player_id: str) -> None:
        if session.get("user_type") in {t.value for t in STAFF_TYPES}:
            return
        if session.get("user_id") != player_id:
            raise AuthorizationError("You can only view your own attendance")

    @app.route("/api/attendance", endpoint="api_attendance_for_date")
    @roles_required(*STAFF_TYPES)
    def attendance_for_date():
        try:
            on = _date_arg(request.args.get("date"))
            records = container.attendance_service.list_for_date(on)
            return jsonify({"date": on.isoformat(), "records": [r.to_dict() for r in records]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading attendance failed")
            return json_error("System error while loading attendance", 500)

    @app.route("/api/attendance", methods=["POST"], endpoint="api_mark_attendance")
    @roles_required(*MARKERS)
    def mark_attendance():
        data = payload()
        try:
            result = container.attendance_service.mark(
                player_id=require_non_empty(data.get("player_id", ""), "player_id"),
                status=require_enum(AttendanceStatus, data.get("status"), "status"),
                on=_date_arg(data.get("date")),
                trainer_id=session.get("user_id"),
                notes=data.get("notes"),
            )
            body = {"record": result.record.to_dict(), "created": result.created, "alert_sent": result.alert_sent}
            return jsonify(body), 201 if result.created else 200
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("marking attendance failed")
            return json_error("System error while marking attendance", 500)

    @app.route("/api/attendance/mark-all", methods=["POST"], endpoint="api_mark_all_present")
    @roles_required(*MARKERS)
    def mark_all_present():
        data = payload()
        try:
            player_ids = data.get("player_ids") or []
            if not isinstance(player_ids, list):
                player_ids = [player_ids]
            count = container.attendance_service.mark_all_present(
                player_ids=[str(p) for p in player_ids],
                on=_date_arg(data.get("date")),
                trainer_id=session.get("user_id"),
            )
            return jsonify({"marked": count})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("bulk attendance failed")
            return json_error("System error while marking attendance", 500)

    @app.route("/api/attendance/<record_id>", methods=["PATCH"], endpoint="api_update_attendance")
    @roles_required(*MARKERS)
    def update_attendance(record_id: str):
        data = payload()
        try:
            status = data.get("status")
            record = container.attendance_service.update_record(
                record_id,
                status=require_enum(AttendanceStatus, status, "status") if status else None,
                notes=data.get("notes"),
            )
            return jsonify({"record": record.to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("updating attendance %s failed", record_id)
            return json_error("System error while updating attendance", 500)

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="api_delete_attendance")
    @roles_required(*MARKERS)
    def delete_attendance(record_id: str):
        try:
            container.attendance_service.delete_record(record_id)
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("deleting attendance %s failed", record_id)
            return json_error("System error while deleting attendance", 500)

    @app.route("/api/attendance/players/<player_id>", endpoint="api_player_attendance")
    @login_required
    def player_attendance(player_id: str):
        try:
            _ensure_can_view(player_id)
            limit = optional_int(request.args.get("limit"), "limit") or DEFAULT_HISTORY_LIMIT
            history = container.attendance_service.history(player_id, limit=limit)
            stats = container.attendance_service.player_statistics(player_id)
            return jsonify({"records": [r.to_dict() for r in history], "statistics": stats.to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading attendance history for %s failed", player_id)
            return json_error("System error while loading attendance", 500)

    @app.route("/api/attendance/players/<player_id>/absences", endpoint="api_player_absences")
    @login_required
    def player_absences(player_id: str):
        try:
            _ensure_can_view(player_id)
            records = container.attendance_service.absences(player_id)
            return jsonify({"records": [r.to_dict() for r in records]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading absences for %s failed", player_id)
            return json_error("System error while loading absences", 500)
