from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_enum, require_non_empty
from ..common.web import error_response, json_error, login_required, payload, roles_required
from ..container import Container
from ..core.enums import LEARNER_TYPES, STAFF_TYPES, ExcuseStatus, UserType
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

REVIEWERS = (UserType.ADMIN, UserType.TRAINER)


def register(app: Flask, container: Container) -> None:
    def _decision_body(result):
        return {
            "excuse": result.excuse.to_dict(),
            "attendance_updated": result.attendance_updated,
            "notifications_sent": result.notifications_sent,
        }

    @app.route("/api/excuses", methods=["POST"], endpoint="api_submit_excuse")
    @roles_required(*LEARNER_TYPES)
    def submit_excuse():
        data = payload()
        try:
            excuse = container.excuse_service.submit(
                player_id=session.get("user_id"),
                absence_date=parse_iso_date(require_non_empty(data.get("absence_date", ""), "Absence date")),
                reason=data.get("reason", ""),
                file_url=data.get("file_url"),
            )
            return jsonify({"excuse": excuse.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("submitting excuse failed")
            return json_error("System error while submitting the excuse", 500)

    @app.route("/api/excuses", endpoint="api_list_excuses")
    @login_required
    def list_excuses():
        try:
            status = request.args.get("status")
            status = require_enum(ExcuseStatus, status, "status") if status else None
            if session.get("user_type") in {t.value for t in STAFF_TYPES}:
                player_id = request.args.get("player_id") or None
            else:
                player_id = session.get("user_id")
            excuses = container.excuse_service.list_excuses(status=status, player_id=player_id)
            return jsonify({"excuses": excuses})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading excuses failed")
            return json_error("System error while loading excuses", 500)

    @app.route("/api/excuses/<excuse_id>/decision", methods=["POST"], endpoint="api_decide_excuse")
    @roles_required(*REVIEWERS)
    def decide_excuse(excuse_id: str):
        data = payload()
        try:
            result = container.excuse_service.decide(
                excuse_id,
                decision=require_enum(ExcuseStatus, data.get("decision"), "decision"),
                trainer_response=data.get("trainer_response", ""),
            )
            return jsonify(_decision_body(result))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("deciding excuse %s failed", excuse_id)
            return json_error("System error while reviewing the excuse", 500)

    @app.route("/api/excuses/<excuse_id>/approve", methods=["POST"], endpoint="api_approve_excuse")
    @roles_required(*REVIEWERS)
    def approve_excuse(excuse_id: str):
        try:
            result = container.excuse_service.approve(
                excuse_id, trainer_response=payload().get("trainer_response", "")
            )
            return jsonify(_decision_body(result))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("approving excuse %s failed", excuse_id)
            return json_error("System error while reviewing the excuse", 500)

    @app.route("/api/excuses/<excuse_id>/reject", methods=["POST"], endpoint="api_reject_excuse")
    @roles_required(*REVIEWERS)
    def reject_excuse(excuse_id: str):
        try:
            result = container.excuse_service.reject(
                excuse_id, trainer_response=payload().get("trainer_response", "")
            )
            return jsonify(_decision_body(result))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("rejecting excuse %s failed", excuse_id)
            return json_error("System error while reviewing the excuse", 500)

    @app.route("/api/excuses/<excuse_id>", methods=["DELETE"], endpoint="api_delete_excuse")
    @roles_required(*REVIEWERS)
    def delete_excuse(excuse_id: str):
        try:
            container.excuse_service.delete(excuse_id)
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("deleting excuse %s failed", excuse_id)
            return json_error("System error while deleting the excuse", 500)
