from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.exceptions import StoreUnavailableError, ValidationError
from ..sync.model import ConsolidatedRecord, SyncSummary

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _fail(message: str, status: int, error: str | None = None):
        return jsonify({"success": False, "error": error, "message": message}), status

    def _result_response(result):
        return jsonify(result.to_dict()), (200 if result.success else 400)

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def api_health():
        return jsonify({"status": "ok", "time": datetime.now().isoformat(timespec="seconds")}), 200

    @app.route("/api/dailyattendance/daily-timein", methods=["POST"], endpoint="api_daily_timein")
    def api_daily_timein():
        data = request.get_json(silent=True) or {}
        try:
            schedule_start = container.enrollment_validator.subject_schedule_start(data.get("subjectId"))
            result = service.time_in(
                data.get("studentId", ""),
                data.get("date"),
                data.get("time") or data.get("timeIn"),
                schedule_start=schedule_start,
            )
        except ValidationError as e:
            return _fail(str(e), 400, "ValidationError")
        except StoreUnavailableError as e:
            return _fail(str(e), 503, "StoreUnavailable")
        except Exception:
            logger.exception("Time in failed")
            return _fail("Error marking time in", 500)
        return _result_response(result)

    @app.route("/api/dailyattendance/daily-timeout", methods=["POST"], endpoint="api_daily_timeout")
    def api_daily_timeout():
        data = request.get_json(silent=True) or {}
        try:
            result = service.time_out(
                data.get("studentId", ""),
                data.get("date"),
                data.get("time") or data.get("timeOut"),
            )
        except ValidationError as e:
            return _fail(str(e), 400, "ValidationError")
        except StoreUnavailableError as e:
            return _fail(str(e), 503, "StoreUnavailable")
        except Exception:
            logger.exception("Time out failed")
            return _fail("Error marking time out", 500)
        return _result_response(result)

    @app.route("/api/dailyattendance/daily-status/<student_id>", methods=["GET"], endpoint="api_daily_status")
    def api_daily_status(student_id: str):
        try:
            status = service.daily_status(student_id, request.args.get("date"))
        except ValidationError as e:
            return _fail(str(e), 400, "ValidationError")
        except StoreUnavailableError as e:
            return _fail(str(e), 503, "StoreUnavailable")
        except Exception:
            logger.exception("Daily status failed for %s", student_id)
            return _fail("Error retrieving daily status", 500)
        return jsonify(status.to_dict()), 200

    @app.route("/api/dailyattendance/daily-history/<student_id>", methods=["GET"], endpoint="api_daily_history")
    def api_daily_history(student_id: str):
        try:
            days = int(request.args.get("days", DEFAULT_HISTORY_DAYS))
            rows = service.history(student_id, days)
        except ValueError:
            return _fail("days must be a number", 400, "ValidationError")
        except ValidationError as e:
            return _fail(str(e), 400, "ValidationError")
        except StoreUnavailableError as e:
            return _fail(str(e), 503, "StoreUnavailable")
        except Exception:
            logger.exception("Daily history failed for %s", student_id)
            return _fail("Error retrieving attendance history", 500)
        return jsonify([r.to_dict() for r in rows]), 200

    @app.route("/api/dailyattendance/sync-offline-data", methods=["POST"], endpoint="api_sync_offline_data")
    def api_sync_offline_data():
        data = request.get_json(silent=True) or {}
        raw_records = data.get("attendanceRecords")
        if not isinstance(raw_records, list):
            return _fail("attendanceRecords must be a list", 400, "ValidationError")

        rejected = SyncSummary()
        records = []
        for index, raw in enumerate(raw_records):
            try:
                records.append(ConsolidatedRecord.from_dict(raw if isinstance(raw, dict) else {}))
            except ValidationError as e:
                rejected.add_error(f"record {index}: {e}")

        try:
            summary = service.apply_synced_records(str(data.get("teacherId") or ""), records)
        except StoreUnavailableError as e:
            return _fail(str(e), 503, "StoreUnavailable")
        except Exception:
            logger.exception("Offline data sync failed")
            return _fail("Error syncing offline data", 500)

        for error in rejected.errors:
            summary.add_error(error)
        summary.message = f"Synced {summary.synced_count} records with {summary.error_count} errors"
        return jsonify(summary.to_dict()), 200
