from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, missing_tables
from .database.connection import DBConfig
from .compliance.controller import register as register_compliance
from .ledger.controller import register as register_ledger
from .time_entries.controller import register as register_time_entries

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    secret_key = getattr(settings, "SECRET_KEY", "")
    if not secret_key:
        raise RuntimeError(f"SECRET_KEY is not set for {settings_module}")
    app.secret_key = secret_key
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            missing = missing_tables(db_config)
            if missing:
                logger.warning("Schema incomplete, missing tables: %s", ", ".join(missing))
        container = build_container(db_config=db_config)

    app.extensions["timesheet_audit"] = container

    register_time_entries(app, container)
    register_compliance(app, container)
    register_ledger(app, container)

    return app
