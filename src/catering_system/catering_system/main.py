from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .cancellations.controller import register as register_cancellations
from .caterings.controller import register as register_caterings
from .common.datetime_utils import Clock, now_local
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.enums import StoreBackend
from .database.bootstrap import apply_schema, list_tables
from .groups.controller import register as register_groups
from .students.controller import register as register_students


def create_app(
    settings_module: Optional[str] = None,
    *,
    container: Optional[Container] = None,
    clock: Clock = now_local,
) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.logger.setLevel(getattr(settings, "LOG_LEVEL", "INFO").upper())

    backend = StoreBackend(getattr(settings, "STORE_BACKEND", StoreBackend.MEMORY.value))
    db_config = getattr(settings, "DB_CONFIG", None)
    app.config["STORE_BACKEND"] = backend.value

    if container is None:
        if backend == StoreBackend.MYSQL:
            app.logger.info(
                "catering-system settings=%s db=%s@%s:%s/%s",
                settings_module,
                db_config.get("user"),
                db_config.get("host"),
                db_config.get("port", 3306),
                db_config.get("database"),
            )
            if bool(getattr(settings, "AUTO_INIT_DB", False)):
                schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
                apply_schema(db_config, schema_path=schema_path)
                app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        else:
            app.logger.info("catering-system settings=%s backend=memory", settings_module)
        container = build_container(backend=backend, db_config=db_config, clock=clock)

    app.extensions["catering_container"] = container

    register_error_handlers(app)
    register_caterings(app, container)
    register_groups(app, container)
    register_students(app, container)
    register_cancellations(app, container)
    register_attendance(app, container)

    return app
