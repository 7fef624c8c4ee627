import os

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# No usable default: sessions must not be signed with a known key.
SECRET_KEY = os.environ.get("SECRET_KEY", "")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "timesheet_audit"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_audit"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

AUTO_INIT_DB = os.getenv("AUTO_INIT_DB", "0") == "1"
