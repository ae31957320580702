"""Create the database tables and, optionally, a first admin account.

Usage:
    APP_ENV=production python scripts/init_db.py [--admin-email EMAIL --admin-password PASSWORD]

ADMIN_EMAIL / ADMIN_PASSWORD environment variables are used when the flags are omitted.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os

from dotenv import load_dotenv

from shift_tracker.config import get_settings_module
from shift_tracker.database.bootstrap import apply_schema, ensure_admin_user, list_tables

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--admin-email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--admin-password", default=os.getenv("ADMIN_PASSWORD"))
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )

    if args.admin_email and args.admin_password:
        ensure_admin_user(db_config, email=args.admin_email, password=args.admin_password)


if __name__ == "__main__":
    main()
