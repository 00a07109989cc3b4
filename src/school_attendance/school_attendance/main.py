from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_clock
from .common.logging_setup import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .identity.controller import register as register_identity

logger = logging.getLogger(__name__)


def create_app(*, settings_module: str | None = None, container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)

        container = build_container(
            db_config=db_config,
            max_connections=int(getattr(settings, "DB_MAX_CONNECTIONS", 3)),
            retry_attempts=int(getattr(settings, "DB_RETRY_ATTEMPTS", 3)),
            school_start=parse_clock(getattr(settings, "SCHOOL_START", "07:30")),
        )

    register_accounts(app, container)
    register_identity(app, container)
    register_attendance(app, container)

    return app
