"""Connection mixin: server registration, credentials and the connected database."""

from __future__ import annotations

import asyncio
import logging

from rich.markup import escape

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.connections.providers.postgresql.adapter import validate_identifier
from pgnav.domains.connections.ui.remediation import ScreenRemediation
from pgnav.domains.connections.ui.screens import ServerFormScreen
from pgnav.domains.explorer.domain.nodes import DatabaseNode
from pgnav.domains.explorer.ui.node_kind import database_scope
from pgnav.shared.core.errors import PgnavError, RemediationCancelled
from pgnav.shared.ui.dialogs import TextPromptScreen
from pgnav.shared.ui.protocols import AppProtocol

logger = logging.getLogger(__name__)


class ConnectionMixin:
    """Mixin providing server and connection actions."""

    connected_database: tuple[str, str] | None = None

    def _load_persisted_database(self: AppProtocol) -> None:
        try:
            loaded = self.connection_service.connected_database()
        except Exception:
            logger.exception("Could not load the persisted database")
            loaded = None
        if loaded is None:
            self.connected_database = None
            return
        server, database = loaded
        self.connected_database = (server.name, database)
        self.log.debug(f"Restored connected database {server.name}/{database}")

    def _update_status_bar(self: AppProtocol) -> None:
        if self.connected_database:
            server_name, database = self.connected_database
            connection = f"[green]Connected:[/] {escape(server_name)}/{escape(database)}"
        else:
            connection = "[dim]Not connected[/]"
        source = escape(str(self.query_path)) if self.query_path else "[dim]untitled[/]"
        parts = [connection, source]
        if self.query_executing:
            parts.append("[yellow]Executing query...[/]")
        self.status_bar.update("  |  ".join(parts))

    def _show_error(self: AppProtocol, error: BaseException, context: str) -> None:
        logger.warning("%s: %s", context, error, exc_info=not isinstance(error, PgnavError))
        self.notify(f"{context}: {error}", title="Error", severity="error")

    def _require_server(self: AppProtocol) -> ConnectionConfig | None:
        server = self._selected_server()
        if server is None:
            self.notify("Select a server first", severity="warning")
        return server

    def action_add_server(self: AppProtocol) -> None:
        self.run_worker(self._add_server_async(), name="add-server", group="connection")

    async def _add_server_async(self: AppProtocol) -> None:
        existing = {server.name for server in self.connection_service.list_servers()}
        default_sslmode = self.services.settings_store.get("default_sslmode")
        result = await self.push_screen_wait(ServerFormScreen(existing, default_sslmode))
        if result is None:
            return
        config, save_password = result
        try:
            self.connection_service.add_server(config, save_password=save_password)
        except PgnavError as exc:
            self._show_error(exc, "Could not add server")
            return
        self._populate_servers()
        self.notify(f"Added server {config.name}")

    def action_enter_credentials(self: AppProtocol) -> None:
        server = self._require_server()
        if server is not None:
            self.run_worker(self._enter_credentials_async(server), name="credentials", group="connection")

    async def _enter_credentials_async(self: AppProtocol, server: ConnectionConfig) -> None:
        try:
            await ScreenRemediation(self).enter_credentials(server)
        except RemediationCancelled:
            return
        self._populate_servers()
        self.notify(f"Credentials updated for {server.name}")

    def action_configure_firewall(self: AppProtocol) -> None:
        server = self._require_server()
        if server is not None:
            self.run_worker(self._configure_firewall_async(server), name="firewall", group="connection")

    async def _configure_firewall_async(self: AppProtocol, server: ConnectionConfig) -> None:
        try:
            await ScreenRemediation(self).configure_firewall(server)
        except RemediationCancelled:
            return
        except PgnavError as exc:
            self._show_error(exc, "Firewall configuration failed")

    def action_create_database(self: AppProtocol) -> None:
        server = self._require_server()
        if server is not None:
            self.run_worker(self._create_database_async(server.name), name="create-database", group="ddl")

    async def _create_database_async(self: AppProtocol, server_name: str) -> None:
        name = await self.push_screen_wait(
            TextPromptScreen("New database name", placeholder="my_database", validator=validate_identifier)
        )
        if name is None:
            return
        try:
            config = await self._resolve_config(server_name)
            await asyncio.to_thread(self.connection_service.create_database, config, name)
        except RemediationCancelled as exc:
            self.notify(str(exc), severity="warning")
            return
        except Exception as exc:
            self._show_error(exc, f"Could not create database {name}")
            return
        self.notify(f"Created database {name}")
        for node in self.object_tree.root.children:
            if node.data is not None and node.data.server_name == server_name:
                self._reload_node(node)
                break

    def action_connect_selected(self: AppProtocol) -> None:
        data = self._selected_data()
        if not isinstance(data, DatabaseNode):
            scope = database_scope(data)
            if scope is None or scope[1] is None:
                self.notify("Select a database to connect to", severity="warning")
                return
            data = DatabaseNode(scope[0], scope[1])
        self.run_worker(self._connect_async(data.server_name, data.database), name="connect", group="connection")

    async def _connect_async(self: AppProtocol, server_name: str, database: str) -> None:
        try:
            await self._resolve_config(server_name, database)
            server = self.connection_service.get_server(server_name)
            self.connection_service.connect_database(server, database)
        except RemediationCancelled as exc:
            self.notify(str(exc), severity="warning")
            return
        except Exception as exc:
            self._show_error(exc, f"Could not connect to {database}")
            return
        self.connected_database = (server_name, database)
        self._refresh_database_labels()
        self._update_status_bar()
        self.notify(f"Connected to {server_name}/{database}")

    def action_disconnect(self: AppProtocol) -> None:
        if self.connected_database is None:
            self.notify("No database is connected", severity="warning")
            return
        self.connection_service.disconnect()
        self.connected_database = None
        self._refresh_database_labels()
        self._update_status_bar()
        self.notify("Disconnected")

    def _refresh_database_labels(self: AppProtocol) -> None:
        for server_node in self.object_tree.root.children:
            for node in server_node.children:
                if isinstance(node.data, DatabaseNode):
                    node.set_label(self._format_node_label(node.data))
