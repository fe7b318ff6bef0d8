from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_clock_time
from .common.responses import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_employee, list_tables
from .employees.controller import register as register_employees

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to skip the database/photo-storage wiring (tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEMO_EMPLOYEE_ID"] = getattr(settings, "DEMO_EMPLOYEE_ID", "")
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            demo_id = ensure_demo_employee(db_config, employee_id=app.config["DEMO_EMPLOYEE_ID"] or None)
            app.config["DEMO_EMPLOYEE_ID"] = app.config["DEMO_EMPLOYEE_ID"] or demo_id
            logger.info("demo employee ready: %s", demo_id)

        container = build_container(
            db_config=db_config,
            cloudinary=getattr(settings, "CLOUDINARY", {}),
            late_after=parse_clock_time(getattr(settings, "LATE_AFTER", "09:30:00")),
        )

    app.extensions["photo_attendance"] = container
    register_error_handlers(app)
    register_employees(app, container)
    register_attendance(app, container)

    return app
