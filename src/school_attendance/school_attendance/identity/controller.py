from __future__ import annotations

import io
import logging
from typing import Optional

from flask import Flask, jsonify, request, send_file, session

from ..container import Container
from ..core.exceptions import StoreUnavailableError
from .model import ActorContext, ValidationResult
from ..qr.codec import decode_image, encode_payload, render_png

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _current_actor(teacher_id: Optional[str]) -> Optional[ActorContext]:
        teacher_id = teacher_id or session.get("teacher_id")
        return container.auth_service.get_actor_context(teacher_id) if teacher_id else None

    def _validate(raw_text: str, teacher_id: Optional[str], subject_id: Optional[str]) -> ValidationResult:
        actor = _current_actor(teacher_id)
        if subject_id:
            return container.enrollment_validator.validate_scan_for_subject(raw_text, subject_id, actor)
        return container.enrollment_validator.validate_against_roster(raw_text, actor)

    def _respond(result: ValidationResult):
        payload = {"success": result.is_valid, **result.to_dict()}
        if not result.is_valid:
            payload["error"] = result.reason.value
            return jsonify(payload), 400
        return jsonify(payload), 200

    @app.route("/api/qrvalidation/validate", methods=["POST"], endpoint="api_qr_validate")
    def api_qr_validate():
        """Server-side scan validation against the roster (and a subject, when given)."""
        data = request.get_json(silent=True) or {}
        try:
            result = _validate(data.get("qrCodeData", ""), data.get("teacherId"), data.get("subjectId"))
        except StoreUnavailableError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception:
            logger.exception("QR validation failed")
            return jsonify({"success": False, "message": "Error validating QR code"}), 500
        return _respond(result)

    @app.route("/api/qrvalidation/validate-image", methods=["POST"], endpoint="api_qr_validate_image")
    def api_qr_validate_image():
        """Accept an uploaded photo, decode the QR code, then validate it."""
        if "image" not in request.files:
            return jsonify({"success": False, "message": "Missing image file"}), 400
        try:
            scanned = decode_image(request.files["image"].stream)
            if not scanned:
                return jsonify({"success": False, "message": "No QR code found in image"}), 400
            result = _validate(scanned, request.form.get("teacherId"), request.form.get("subjectId"))
        except StoreUnavailableError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception:
            logger.exception("QR image validation failed")
            return jsonify({"success": False, "message": "Error validating QR image"}), 500
        return _respond(result)

    @app.route("/api/student/<student_id>/qr.png", methods=["GET"], endpoint="api_student_qr")
    def api_student_qr(student_id: str):
        """PNG of the student's pipe payload, for printing ID cards."""
        try:
            student = container.enrollment_repo.get_student(student_id)
            if student is None:
                return jsonify({"success": False, "message": f"Student not found: {student_id}"}), 404
            png = render_png(encode_payload(student.to_identity()))
        except StoreUnavailableError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception as e:
            logger.exception("QR rendering failed for %s", student_id)
            return jsonify({"success": False, "message": str(e)}), 500
        return send_file(io.BytesIO(png), mimetype="image/png")
