from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, db_config: Mapping) -> "DBConfig":
        """Build from a settings `DB_CONFIG` dict (`port` defaults to 3306)."""
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password", "")),
            database=str(db_config["database"]),
        )


class DatabaseConnection:
    """Opens one MySQL connection per repository call.

    Every call commits or rolls back on its own (see `mysql_base.db_cursor`),
    so a workflow step spanning several calls is not atomic.
    """

    def __init__(self, config: DBConfig):
        self.config = config

    def connect(self):
        # FOUND_ROWS: UPDATE rowcount reports matched rows, not changed rows.
        return mysql.connector.connect(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            database=self.config.database,
            client_flags=[ClientFlag.FOUND_ROWS],
        )
