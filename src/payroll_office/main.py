from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .leave.controller import register as register_leave
from .logging_config import configure_logging
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .web.errors import register_error_handlers
from .web.responses import ok

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.config["SECRET_KEY"] = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TOKEN_MAX_AGE_SECONDS"] = int(
        getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)
    )

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
            rate_policy=getattr(settings, "DEFAULT_RATE_POLICY", None),
            leave_allowances=getattr(settings, "LEAVE_ALLOWANCES", None),
        )

    app.extensions["payroll_office"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_payroll(app, container)
    register_leave(app, container)
    register_reports(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        return ok({"status": "ok"})

    return app
