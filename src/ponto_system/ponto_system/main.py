from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .clock.controller import register as register_clock
from .common.logging_utils import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS, policy_by_name
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app. One container per process: passed in, or built from settings."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    session_days = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config.update(
        DEBUG=bool(getattr(settings, "DEBUG", False)),
        TESTING=bool(getattr(settings, "TESTING", False)),
        SESSION_COOKIE_NAME="ponto-session",
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=bool(getattr(settings, "SESSION_COOKIE_SECURE", False)),
        PERMANENT_SESSION_LIFETIME=timedelta(days=session_days),
        # cookie lifetime follows the token: set at login, never pushed forward
        SESSION_REFRESH_EACH_REQUEST=False,
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            policy=policy_by_name(getattr(settings, "CLOCK_POLICY", "strict")),
            session_days=session_days,
        )

    app.extensions["ponto_container"] = container

    register_users(app, container)
    register_clock(app, container)

    return app
