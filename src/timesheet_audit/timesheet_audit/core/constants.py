"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Statutory working-time thresholds, in minutes.
DAILY_WARNING_MINUTES = 600
DAILY_LIMIT_MINUTES = 720
WEEKLY_WARNING_MINUTES = 2880
WEEKLY_LIMIT_MINUTES = 3600

MINUTES_PER_DAY = 24 * 60

# Ledger hashing contract.
GENESIS_HASH = "GENESIS"
HASH_FIELD_SEPARATOR = "|"
HASH_NULL_TOKEN = "\\N"
LEDGER_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PAYLOAD_SCHEMA_VERSION = 1

TIME_ENTRIES_TABLE = "time_entries"

DEFAULT_AUDIT_LIST_LIMIT = 50
DEFAULT_FINDINGS_REPORT_DAYS = 30
