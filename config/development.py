import os

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_audit"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

# Apply database/schema.sql at startup; every statement is idempotent.
AUTO_INIT_DB = os.getenv("AUTO_INIT_DB", "1") == "1"
