from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import AuthenticationError, StoreUnavailableError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = request.get_json(silent=True) or {}
        try:
            actor = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except AuthenticationError as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except StoreUnavailableError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception:
            logger.exception("Login failed")
            return jsonify({"success": False, "message": "Login failed"}), 500

        session["teacher_id"] = actor.teacher_id
        return jsonify({"success": True, "message": f"Welcome, {actor.full_name}", "teacher": actor.to_dict()}), 200

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"}), 200

    @app.route("/api/teacher/<teacher_id>/context", methods=["GET"], endpoint="api_teacher_context")
    def api_teacher_context(teacher_id: str):
        try:
            actor = container.auth_service.get_actor_context(teacher_id)
        except StoreUnavailableError as e:
            return jsonify({"success": False, "message": str(e)}), 503
        except Exception:
            logger.exception("Could not load teacher %s", teacher_id)
            return jsonify({"success": False, "message": "Could not load teacher"}), 500

        if actor is None:
            return jsonify({"success": False, "message": f"Teacher not found: {teacher_id}"}), 404
        return jsonify({"success": True, "teacher": actor.to_dict()}), 200
