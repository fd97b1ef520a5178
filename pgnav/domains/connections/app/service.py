"""Connection-level commands shared by the CLI and the explorer."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pgnav.domains.connections.app.remediation import RemediationHandler, obtain_client_config
from pgnav.domains.connections.app.session import ConnectionSession
from pgnav.domains.connections.domain.config import DATABASE_ID_SEPARATOR, ConnectionConfig, split_database_id
from pgnav.domains.explorer.domain.nodes import RoutineNode, TableNode
from pgnav.shared.core.errors import PgnavError, UnknownServerError

if TYPE_CHECKING:
    from pgnav.shared.app.services import AppServices

logger = logging.getLogger(__name__)


class ConnectionService:
    """Server registry, connected-database state and DDL commands."""

    def __init__(self, services: AppServices) -> None:
        self.services = services
        self.adapter = services.create_adapter()

    @property
    def store(self) -> Any:
        return self.services.connection_store

    def list_servers(self) -> list[ConnectionConfig]:
        return self.store.load_all()

    def get_server(self, name: str) -> ConnectionConfig:
        return self.store.get(name)

    def add_server(self, config: ConnectionConfig, *, save_password: bool = False) -> None:
        if not config.name or DATABASE_ID_SEPARATOR in config.name:
            raise PgnavError(f'Server names must be non-empty and cannot contain "{DATABASE_ID_SEPARATOR}".')
        if any(existing.name == config.name for existing in self.store.load_all()):
            raise PgnavError(f'A server named "{config.name}" already exists.')
        self.store.save(config, save_password=save_password)

    def update_credentials(
        self,
        server: ConnectionConfig,
        username: str,
        password: str,
        *,
        save_password: bool = False,
    ) -> ConnectionConfig:
        updated = server.with_credentials(username, password)
        self.store.save(updated, save_password=save_password)
        return updated

    def remove_server(self, name: str) -> None:
        self.store.remove(name)
        connected = self.services.state_store.get_connected_database()
        if connected and connected.startswith(f"{name}{DATABASE_ID_SEPARATOR}"):
            self.services.state_store.set_connected_database(None)

    async def resolve(
        self,
        server: ConnectionConfig,
        database: str,
        remediation: RemediationHandler,
    ) -> ConnectionConfig:
        """Verified client config for ``database``, running remediation as needed."""

        async def probe(config: ConnectionConfig) -> None:
            await asyncio.to_thread(self.adapter.verify, config)

        return await obtain_client_config(server, database, probe=probe, remediation=remediation)

    def connect_database(self, server: ConnectionConfig, database: str) -> str:
        database_id = server.database_id(database)
        self.services.state_store.set_connected_database(database_id)
        logger.info("Connected database set to %s", database_id)
        return database_id

    def disconnect(self) -> None:
        self.services.state_store.set_connected_database(None)

    def connected_database(self) -> tuple[ConnectionConfig, str] | None:
        """Load the persisted connected database, if its server still exists."""
        database_id = self.services.state_store.get_connected_database()
        if not database_id:
            return None
        try:
            server_name, database = split_database_id(database_id)
            return self.store.get(server_name), database
        except (ValueError, UnknownServerError) as exc:
            logger.warning("Discarding persisted database %r: %s", database_id, exc)
            self.services.state_store.set_connected_database(None)
            return None

    def create_database(self, server_config: ConnectionConfig, name: str) -> None:
        with ConnectionSession(server_config, self.adapter) as session:
            self.adapter.create_database(session.connection, name)
        logger.info("Created database %s on %s", name, server_config.name)

    def drop_database(self, server_config: ConnectionConfig, name: str) -> None:
        if server_config.database == name:
            raise PgnavError(f'Cannot drop "{name}" while connected to it; use another maintenance database.')
        with ConnectionSession(server_config, self.adapter) as session:
            self.adapter.drop_database(session.connection, name)
        database_id = server_config.database_id(name)
        if self.services.state_store.get_connected_database() == database_id:
            self.services.state_store.set_connected_database(None)
        logger.info("Dropped database %s on %s", name, server_config.name)

    def drop_table(self, config: ConnectionConfig, node: TableNode) -> None:
        with ConnectionSession(config, self.adapter) as session:
            self.adapter.drop_table(session.connection, node.row)
        logger.info("Dropped table %s.%s", node.row.schema, node.row.name)

    def drop_routine(self, config: ConnectionConfig, node: RoutineNode) -> None:
        with ConnectionSession(config, self.adapter) as session:
            self.adapter.drop_routine(session.connection, node.row)
        logger.info("Dropped %s %s.%s(%s)", node.row.kind.value, node.row.schema, node.row.name, node.row.args)
