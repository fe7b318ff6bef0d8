from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "photo_attendance")),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: Short-lived connections per operation, so concurrent requests never
    share a connection.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        kwargs = {
            "host": self._config.host,
            "port": int(self._config.port),
            "user": self._config.user,
            "password": self._config.password,
        }
        if with_database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
