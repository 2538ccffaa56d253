from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_SHELL_IDLE_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .identity.controller import register as register_identity
from .students.controller import register as register_students
from .ui.controller import register as register_ui

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["TOAST_SECONDS"] = int(getattr(settings, "TOAST_SECONDS", 3))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            installation_id=getattr(settings, "INSTALLATION_ID"),
            secret_key=app.secret_key,
            qr_service_url=getattr(settings, "QR_SERVICE_URL"),
            qr_image_size=getattr(settings, "QR_IMAGE_SIZE"),
            toast_seconds=app.config["TOAST_SECONDS"],
            shell_idle_seconds=int(getattr(settings, "SHELL_IDLE_SECONDS", DEFAULT_SHELL_IDLE_SECONDS)),
        )

    app.extensions["qr_attendance"] = container

    register_identity(app, container)
    register_ui(app, container)
    register_students(app, container)
    register_attendance(app, container)

    return app
