from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.http import ok, register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .core.log import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .late_permissions.controller import register as register_late_permissions
from .notifications.controller import register as register_notifications
from .schedule.model import OJTSchedule
from .timesheets.controller import register as register_timesheets

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            schedule=OJTSchedule.from_settings(settings),
            photo_upload_dir=getattr(settings, "PHOTO_UPLOAD_DIR", "uploads/attendance"),
        )

    app.extensions["ojt_container"] = container
    register_error_handlers(app)

    @app.get("/api/health", endpoint="health")
    def health():
        return ok({"status": "ok"})

    register_attendance(app, container)
    register_late_permissions(app, container)
    register_timesheets(app, container)
    register_notifications(app, container)

    return app
