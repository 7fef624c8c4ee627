"""Export a date range of the audit ledger to CSV for legal evidence.

Usage: python scripts/export_audit.py 2026-01-01 2026-01-31 [table]
"""

from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timesheet_audit.timesheet_audit.common.datetime_utils import parse_iso_date
from src.timesheet_audit.timesheet_audit.container import build_container
from src.timesheet_audit.timesheet_audit.ledger.export import render_audit_csv


def main(argv: list[str]) -> None:
    if len(argv) < 2:
        raise SystemExit(__doc__)
    start, end = parse_iso_date(argv[0]), parse_iso_date(argv[1])
    table = argv[2] if len(argv) > 2 else None

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))

    entries = container.export_audit_range(start, end, table)
    report = container.verify_audit_chain()

    out_dir = REPO_ROOT / "exports"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"audit_log_{start.isoformat()}_{end.isoformat()}.csv"
    out_file.write_bytes(render_audit_csv(entries, report, exported_at=container.clock()))
    print(f"OK: {len(entries)} entries exported to {out_file}")


if __name__ == "__main__":
    main(sys.argv[1:])
