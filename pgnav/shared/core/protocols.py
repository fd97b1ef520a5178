"""Store and provider protocols used by the service container."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pgnav.domains.connections.domain.config import ConnectionConfig


class ConnectionStoreProtocol(Protocol):
    def load_all(self) -> list[ConnectionConfig]:
        ...

    def get(self, name: str) -> ConnectionConfig:
        ...

    def save(self, config: ConnectionConfig, *, save_password: bool = False) -> None:
        ...

    def remove(self, name: str) -> None:
        ...


class SettingsStoreProtocol(Protocol):
    def load_all(self) -> dict[str, Any]:
        ...

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class StateStoreProtocol(Protocol):
    def get_connected_database(self) -> str | None:
        ...

    def set_connected_database(self, database_id: str | None) -> None:
        ...
