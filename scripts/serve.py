"""Run the JSON API with Flask's development server.

Usage: APP_ENV=development python scripts/serve.py [port]
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timesheet_audit.timesheet_audit.main import create_app


def main(argv: list[str]) -> None:
    port = int(argv[0]) if argv else 5000
    app = create_app()
    app.run(host="127.0.0.1", port=port, debug=app.config["DEBUG"])


if __name__ == "__main__":
    main(sys.argv[1:])
