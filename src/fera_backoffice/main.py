from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .assistant.controller import register as register_assistant
from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .company.controller import register as register_company
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .finance.controller import register as register_finance
from .inventory.controller import register as register_inventory
from .payroll.controller import register as register_payroll
from .production.controller import register as register_production
from .session.controller import register as register_session
from .settings import get_settings_module

logger = logging.getLogger("fera_backoffice")


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    backend = str(getattr(settings, "STORE_BACKEND", "memory")).lower()
    logger.info("settings=%s store=%s", settings_module, backend)

    if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        db_config = getattr(settings, "DB_CONFIG")
        apply_schema(db_config)
        logger.info(
            "schema ready on %s@%s/%s (tables=%d)",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("database"),
            len(list_tables(db_config)),
        )

    container = build_container(settings)
    app.extensions["fera_container"] = container

    register_error_handlers(app)
    register_session(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_employees(app, container)
    register_production(app, container)
    register_finance(app, container)
    register_inventory(app, container)
    register_company(app, container)
    register_assistant(app, container)

    return app
