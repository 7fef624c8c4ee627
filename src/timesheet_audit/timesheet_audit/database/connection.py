from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    # utf8mb4 so payload text reads back byte-identical to what was hashed.
    charset: str = "utf8mb4"
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(raw.get("host") or "localhost"),
            port=int(raw.get("port") or 3306),
            user=str(raw.get("user") or "root"),
            password=str(raw.get("password") or ""),
            database=str(raw.get("database") or "timesheet_audit"),
            charset=str(raw.get("charset") or "utf8mb4"),
            connect_timeout=int(raw.get("connect_timeout") or 10),
        )

    def describe(self) -> str:
        """user@host:port/database, for logs (never includes the password)."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Hands out short-lived connections, one per repository call.

    Autocommit is off: every call runs in the transaction opened by
    ``db_cursor`` and ends in commit or rollback.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        current = cls._instance
        if current is None or current.config != config:
            current = cls._instance = cls(config)
        return current

    def connect(self, *, with_database: bool = True):
        cfg = self._config
        return mysql.connector.connect(
            host=cfg.host,
            port=cfg.port,
            user=cfg.user,
            password=cfg.password,
            charset=cfg.charset,
            connection_timeout=cfg.connect_timeout,
            autocommit=False,
            **({"database": cfg.database} if with_database else {}),
        )
