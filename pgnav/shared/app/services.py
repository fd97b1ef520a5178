"""Service container and builders for pgnav."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pgnav.shared.app.runtime import RuntimeConfig
from pgnav.shared.core.processes import SubprocessRunner, SyncProcessRunner
from pgnav.shared.core.protocols import (
    ConnectionStoreProtocol,
    SettingsStoreProtocol,
    StateStoreProtocol,
)


@dataclass
class AppServices:
    """Container for runtime services and factories."""

    runtime: RuntimeConfig
    connection_store: ConnectionStoreProtocol
    settings_store: SettingsStoreProtocol
    state_store: StateStoreProtocol
    adapter_factory: Callable[[], Any]
    process_runner: SyncProcessRunner

    def create_adapter(self) -> Any:
        return self.adapter_factory()

    def create_firewall_configurator(self) -> Any:
        from pgnav.domains.connections.app.firewall import FirewallConfigurator

        return FirewallConfigurator.from_settings(self.settings_store.load_all(), self.process_runner)


def build_app_services(
    runtime: RuntimeConfig,
    *,
    connection_store: ConnectionStoreProtocol | None = None,
    settings_store: SettingsStoreProtocol | None = None,
    state_store: StateStoreProtocol | None = None,
    adapter_factory: Callable[[], Any] | None = None,
    process_runner: SyncProcessRunner | None = None,
) -> AppServices:
    """Build the default service container for the app."""
    from pgnav.domains.connections.providers.postgresql.adapter import PostgreSQLAdapter
    from pgnav.domains.connections.store.connections import ConnectionStore
    from pgnav.domains.connections.store.state import StateStore
    from pgnav.domains.shell.store.settings import SettingsStore

    return AppServices(
        runtime=runtime,
        connection_store=connection_store or ConnectionStore(runtime.connections_path),
        settings_store=settings_store or SettingsStore(runtime.settings_path),
        state_store=state_store or StateStore(runtime.state_path),
        adapter_factory=adapter_factory or PostgreSQLAdapter,
        process_runner=process_runner or SubprocessRunner(),
    )
