from __future__ import annotations

import csv
import io
import logging
from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import error_response, json_error, payload, roles_required
from ..container import Container
from ..core.enums import STAFF_TYPES, UserType
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

CSV_FIELDS = ["code", "full_name", "sport_type", "present", "absent", "excused", "total", "rate"]


def register(app: Flask, container: Container) -> None:
    def _month_arg(value) -> str:
        return value or now_local().strftime("%Y-%m")

    def _write_report_csv(*, report, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in report.rows:
            writer.writerow(asdict(row))

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/dashboard", endpoint="api_dashboard")
    @roles_required(*STAFF_TYPES)
    def dashboard():
        try:
            return jsonify(asdict(container.report_service.dashboard()))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("dashboard statistics failed")
            return json_error("System error while loading statistics", 500)

    @app.route("/api/reports/monthly", endpoint="api_monthly_report")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def monthly_report():
        try:
            report = container.report_service.monthly_report(_month_arg(request.args.get("month")))
            return jsonify(report.to_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("monthly report failed")
            return json_error("System error while building the report", 500)

    @app.route("/api/reports/monthly.csv", endpoint="api_monthly_report_csv")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def monthly_report_csv():
        try:
            report = container.report_service.monthly_report(_month_arg(request.args.get("month")))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("monthly report export failed")
            return json_error("System error while building the report", 500)
        return _write_report_csv(report=report, filename=f"attendance_{report.month}.csv")

    @app.route("/api/reports/monthly", methods=["POST"], endpoint="api_save_monthly_report")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def save_monthly_report():
        try:
            report = container.report_service.save_monthly_report(_month_arg(payload().get("month")))
            return jsonify(report.to_dict()), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("saving monthly report failed")
            return json_error("System error while saving the report", 500)

    @app.route("/api/reports/monthly/<month>/saved", endpoint="api_saved_monthly_report")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def saved_monthly_report(month: str):
        try:
            saved = container.report_service.saved_monthly_report(month)
            if saved is None:
                return json_error("No saved report for this month", 404)
            return jsonify(saved)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading saved report %s failed", month)
            return json_error("System error while loading the report", 500)

    @app.route("/api/reports/daily", methods=["POST"], endpoint="api_save_daily_snapshot")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def save_daily_snapshot():
        try:
            value = payload().get("date")
            on = parse_iso_date(value) if value else now_local().date()
            snapshot = container.report_service.save_daily_snapshot(on)
            return jsonify(asdict(snapshot)), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("saving daily attendance failed")
            return json_error("System error while saving attendance", 500)

    @app.route("/api/reports/daily", endpoint="api_daily_snapshots")
    @roles_required(UserType.ADMIN, UserType.TRAINER)
    def daily_snapshots():
        try:
            snapshots = container.report_service.saved_daily_snapshots()
            return jsonify({"snapshots": [asdict(s) for s in snapshots]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("loading saved attendance failed")
            return json_error("System error while loading saved attendance", 500)
