from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
        )


class DatabaseConnection:
    """Opens one short-lived MySQL connection per ``db_cursor`` block."""

    def __init__(self, config: DBConfig):
        self.config = config

    def connect(self):
        return mysql.connector.connect(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            database=self.config.database,
            charset="utf8mb4",
            autocommit=False,
        )
