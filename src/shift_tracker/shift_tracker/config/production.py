import os

from . import parse_admin_emails

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_tracker"),
}

STORAGE_DIR = os.getenv("STORAGE_DIR", "/var/lib/shift-tracker/storage")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

ADMIN_EMAILS = parse_admin_emails(os.getenv("ADMIN_EMAILS", ""))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
