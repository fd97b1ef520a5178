"""Server registry persisted to connections.json."""

from __future__ import annotations

import logging
from pathlib import Path

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.shared.core.errors import UnknownServerError
from pgnav.shared.core.json_store import JsonFileStore

logger = logging.getLogger(__name__)


class ConnectionStore(JsonFileStore):
    """Registered servers, keyed by name.

    Passwords entered during a session live in memory only unless the caller
    asks for them to be saved.
    """

    def __init__(self, file_path: Path) -> None:
        super().__init__(file_path)
        self._session_passwords: dict[str, str] = {}

    def _load_raw(self) -> list[dict]:
        data = self._read(default={"connections": []})
        if not isinstance(data, dict):
            return []
        items = data.get("connections", [])
        return [item for item in items if isinstance(item, dict) and item.get("name")]

    def load_all(self) -> list[ConnectionConfig]:
        configs = []
        for item in self._load_raw():
            config = ConnectionConfig.from_dict(item)
            session_password = self._session_passwords.get(config.name)
            if session_password and not config.password:
                config = config.with_credentials(config.username, session_password)
            configs.append(config)
        return configs

    def get(self, name: str) -> ConnectionConfig:
        for config in self.load_all():
            if config.name == name:
                return config
        raise UnknownServerError(name)

    def save(self, config: ConnectionConfig, *, save_password: bool = False) -> None:
        items = [item for item in self._load_raw() if item.get("name") != config.name]
        items.append(config.to_dict(include_passwords=save_password))
        items.sort(key=lambda item: str(item["name"]).lower())
        if config.password:
            self._session_passwords[config.name] = config.password
        self._write({"connections": items})
        logger.info("Saved server %s (%s)", config.name, config.display_host)

    def remove(self, name: str) -> None:
        items = self._load_raw()
        remaining = [item for item in items if item.get("name") != name]
        if len(remaining) == len(items):
            raise UnknownServerError(name)
        self._session_passwords.pop(name, None)
        self._write({"connections": remaining})
        logger.info("Removed server %s", name)


class InMemoryConnectionStore:
    """Connection store for tests and throwaway sessions."""

    def __init__(self, connections: list[ConnectionConfig] | None = None) -> None:
        self._configs = {config.name: config for config in connections or []}

    def load_all(self) -> list[ConnectionConfig]:
        return sorted(self._configs.values(), key=lambda config: config.name.lower())

    def get(self, name: str) -> ConnectionConfig:
        try:
            return self._configs[name]
        except KeyError:
            raise UnknownServerError(name) from None

    def save(self, config: ConnectionConfig, *, save_password: bool = False) -> None:
        self._configs[config.name] = config

    def remove(self, name: str) -> None:
        if self._configs.pop(name, None) is None:
            raise UnknownServerError(name)
