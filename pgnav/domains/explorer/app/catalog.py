"""Catalog walker: lists the children of a catalog node."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pgnav.domains.connections.app.session import ConnectionSession
from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.explorer.domain.nodes import (
    DATABASE_FOLDERS,
    CatalogNode,
    DatabaseNode,
    FolderKind,
    FolderNode,
    RoutineNode,
    ServerNode,
    TableNode,
)

logger = logging.getLogger(__name__)


def find_duplicate_names(names: Iterable[str]) -> set[str]:
    """Return every name that occurs more than once."""
    seen: set[str] = set()
    duplicates: set[str] = set()
    for name in names:
        if name in seen:
            duplicates.add(name)
        else:
            seen.add(name)
    return duplicates


class CatalogWalker:
    """Issues one metadata query per expand and maps the rows to nodes.

    Children are never cached; driver errors propagate to the caller.
    """

    def __init__(
        self,
        adapter: Any,
        session_factory: Callable[[ConnectionConfig, Any], ConnectionSession] = ConnectionSession,
    ) -> None:
        self.adapter = adapter
        self.session_factory = session_factory

    def list_children(self, node: CatalogNode, config: ConnectionConfig) -> list[CatalogNode]:
        """List children of ``node`` using ``config`` (already targeting the node's database)."""
        if isinstance(node, ServerNode):
            with self.session_factory(config, self.adapter) as session:
                databases = self.adapter.get_databases(session.connection)
            return [DatabaseNode(server_name=node.server_name, database=name) for name in databases]

        if isinstance(node, DatabaseNode):
            return [
                FolderNode(server_name=node.server_name, database=node.database, folder=folder)
                for folder in DATABASE_FOLDERS
            ]

        if isinstance(node, FolderNode):
            return self._list_folder(node, config)

        return []

    def _list_folder(self, node: FolderNode, config: ConnectionConfig) -> list[CatalogNode]:
        with self.session_factory(config, self.adapter) as session:
            if node.folder is FolderKind.TABLES:
                tables = self.adapter.get_tables(session.connection)
                duplicates = find_duplicate_names(table.name for table in tables)
                children: list[CatalogNode] = [
                    TableNode(
                        server_name=node.server_name,
                        database=node.database,
                        row=table,
                        is_duplicate=table.name in duplicates,
                    )
                    for table in tables
                ]
            else:
                routines = self.adapter.get_routines(session.connection, node.folder.routine_kind)
                duplicates = find_duplicate_names(routine.name for routine in routines)
                children = [
                    RoutineNode(
                        server_name=node.server_name,
                        database=node.database,
                        row=routine,
                        is_duplicate=routine.name in duplicates,
                    )
                    for routine in routines
                ]
        logger.debug("Loaded %d %s for %s", len(children), node.folder.key, node.node_id)
        return children
