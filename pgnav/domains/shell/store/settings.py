"""User settings persisted to settings.json."""

from __future__ import annotations

from typing import Any

from pgnav.shared.core.json_store import JsonFileStore

DEFAULT_SETTINGS: dict[str, Any] = {
    "firewall_command": [],
    "default_sslmode": "prefer",
}


class SettingsStore(JsonFileStore):
    def load_all(self) -> dict[str, Any]:
        data = self._read(default={})
        merged = dict(DEFAULT_SETTINGS)
        if isinstance(data, dict):
            merged.update(data)
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        return self.load_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read(default={})
        if not isinstance(data, dict):
            data = {}
        data[key] = value
        self._write(data)


class InMemorySettingsStore:
    def __init__(self, settings: dict[str, Any] | None = None) -> None:
        self._settings = dict(DEFAULT_SETTINGS)
        self._settings.update(settings or {})

    def load_all(self) -> dict[str, Any]:
        return dict(self._settings)

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
