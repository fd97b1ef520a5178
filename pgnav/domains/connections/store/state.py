"""Cross-session state: which database was last connected."""

from __future__ import annotations

from pgnav.shared.core.json_store import JsonFileStore

CONNECTED_DATABASE_KEY = "connected_database"


class StateStore(JsonFileStore):
    def get_connected_database(self) -> str | None:
        data = self._read(default={})
        value = data.get(CONNECTED_DATABASE_KEY) if isinstance(data, dict) else None
        return str(value) if value else None

    def set_connected_database(self, database_id: str | None) -> None:
        data = self._read(default={})
        if not isinstance(data, dict):
            data = {}
        if database_id:
            data[CONNECTED_DATABASE_KEY] = database_id
        else:
            data.pop(CONNECTED_DATABASE_KEY, None)
        self._write(data)


class InMemoryStateStore:
    def __init__(self, connected_database: str | None = None) -> None:
        self._connected_database = connected_database

    def get_connected_database(self) -> str | None:
        return self._connected_database

    def set_connected_database(self, database_id: str | None) -> None:
        self._connected_database = database_id or None
