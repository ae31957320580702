from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .common.web import EXTENSION_KEY, register_error_handlers
from .config import get_settings_module
from .container import build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, list_tables
from .days_off.controller import register as register_days_off
from .payslips.controller import register as register_payslips
from .petty_cash.controller import register as register_petty_cash
from .time_entries.controller import register as register_time_entries
from .users.controller import register as register_users
from .workspaces.controller import register as register_workspaces

logger = logging.getLogger(__name__)


def create_app(container=None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.permanent_session_lifetime = timedelta(days=app.config["SESSION_DAYS"])

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            storage_dir=getattr(settings, "STORAGE_DIR"),
            public_base_url=getattr(settings, "PUBLIC_BASE_URL", ""),
            admin_emails=getattr(settings, "ADMIN_EMAILS", ()),
        )

    app.extensions[EXTENSION_KEY] = container
    register_error_handlers(app)

    register_users(app, container)
    register_workspaces(app, container)
    register_time_entries(app, container)
    register_payslips(app, container)
    register_days_off(app, container)
    register_petty_cash(app, container)

    return app
