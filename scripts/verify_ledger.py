"""Replay the audit ledger and print the integrity report.

Exit code 0 when every entry is intact, 1 otherwise.
"""

from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timesheet_audit.timesheet_audit.container import build_container


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))
    report = container.verify_audit_chain()

    print(f"Entries checked: {report.total}")
    print(f"Valid entries:   {report.valid_count}")
    print(f"Chain intact:    {'NO' if report.chain_broken else 'YES'}")
    for finding in report.invalid:
        print(f"  #{finding.entry_id} {finding.reason.value}: expected {finding.expected} got {finding.actual}")
    return 0 if report.intact else 1


if __name__ == "__main__":
    sys.exit(main())
