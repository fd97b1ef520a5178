"""Connection descriptor for a registered PostgreSQL server."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any

DEFAULT_PORT = "5432"
DEFAULT_DATABASE = "postgres"
DEFAULT_SSLMODE = "prefer"
SSL_MODES = ("disable", "allow", "prefer", "require", "verify-ca", "verify-full")

DATABASE_ID_SEPARATOR = "/"


@dataclass(frozen=True)
class ConnectionConfig:
    """Host, port, credentials and SSL mode for one server.

    ``database`` is the database the connection targets; the stored server
    record keeps the maintenance database and :meth:`for_database` derives the
    per-database configs used when browsing or executing.
    """

    name: str
    host: str
    port: str = DEFAULT_PORT
    username: str = ""
    password: str = ""
    sslmode: str = DEFAULT_SSLMODE
    database: str = DEFAULT_DATABASE

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @property
    def display_host(self) -> str:
        return f"{self.host}:{self.port}"

    def for_database(self, database: str) -> ConnectionConfig:
        return replace(self, database=database)

    def with_credentials(self, username: str, password: str) -> ConnectionConfig:
        return replace(self, username=username, password=password)

    def database_id(self, database: str | None = None) -> str:
        return f"{self.name}{DATABASE_ID_SEPARATOR}{database or self.database}"

    def to_dict(self, include_passwords: bool = False) -> dict[str, Any]:
        data = asdict(self)
        if not include_passwords:
            data.pop("password", None)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConnectionConfig:
        sslmode = str(data.get("sslmode") or DEFAULT_SSLMODE)
        if sslmode not in SSL_MODES:
            sslmode = DEFAULT_SSLMODE
        return cls(
            name=str(data["name"]),
            host=str(data.get("host") or "localhost"),
            port=str(data.get("port") or DEFAULT_PORT),
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
            sslmode=sslmode,
            database=str(data.get("database") or DEFAULT_DATABASE),
        )


def split_database_id(database_id: str) -> tuple[str, str]:
    """Split a persisted ``server/database`` id. Raises ValueError if malformed."""
    server, sep, database = database_id.partition(DATABASE_ID_SEPARATOR)
    if not sep or not server or not database:
        raise ValueError(f"Malformed database id: {database_id!r}")
    return server, database
