"""Create the configured database and apply database/schema.sql.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timesheet_audit.timesheet_audit.database.bootstrap import apply_schema, chain_head_ready, missing_tables
from src.timesheet_audit.timesheet_audit.database.connection import DBConfig


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    target = DBConfig.from_dict(db_config).describe()

    count = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    missing = missing_tables(db_config)
    if missing:
        print(f"FAILED: {target} is missing tables: {', '.join(missing)}")
        return 1
    if not chain_head_ready(db_config):
        print(f"FAILED: {target} has no audit_chain_head row")
        return 1

    print(f"OK: {count} schema statements applied to {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
