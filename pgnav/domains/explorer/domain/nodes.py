"""Catalog nodes shown in the explorer tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pgnav.domains.connections.domain.config import DATABASE_ID_SEPARATOR, ConnectionConfig
from pgnav.domains.explorer.domain.rows import RoutineKind, RoutineRow, TableRow


class FolderKind(Enum):
    TABLES = ("tables", "Tables", "Table")
    FUNCTIONS = ("functions", "Functions", "Function")
    PROCEDURES = ("procedures", "Stored Procedures", "Stored Procedure")

    def __init__(self, key: str, label: str, child_label: str) -> None:
        self.key = key
        self.label = label
        self.child_label = child_label

    @property
    def routine_kind(self) -> RoutineKind | None:
        if self is FolderKind.FUNCTIONS:
            return RoutineKind.FUNCTION
        if self is FolderKind.PROCEDURES:
            return RoutineKind.PROCEDURE
        return None


@dataclass(frozen=True)
class ServerNode:
    config: ConnectionConfig

    allow_expand = True

    def get_node_kind(self) -> str:
        return "server"

    @property
    def server_name(self) -> str:
        return self.config.name

    @property
    def node_id(self) -> str:
        return self.config.name

    @property
    def label(self) -> str:
        return self.config.name

    @property
    def description(self) -> str:
        return self.config.display_host


@dataclass(frozen=True)
class DatabaseNode:
    server_name: str
    database: str

    allow_expand = True

    def get_node_kind(self) -> str:
        return "database"

    @property
    def node_id(self) -> str:
        return f"{self.server_name}{DATABASE_ID_SEPARATOR}{self.database}"

    @property
    def label(self) -> str:
        return self.database


@dataclass(frozen=True)
class FolderNode:
    """Schema collection (Tables, Functions or Stored Procedures) of a database."""

    server_name: str
    database: str
    folder: FolderKind

    allow_expand = True

    def get_node_kind(self) -> str:
        return "folder"

    @property
    def node_id(self) -> str:
        return f"{self.server_name}{DATABASE_ID_SEPARATOR}{self.database}{DATABASE_ID_SEPARATOR}{self.folder.key}"

    @property
    def label(self) -> str:
        return self.folder.label


@dataclass(frozen=True)
class TableNode:
    server_name: str
    database: str
    row: TableRow
    is_duplicate: bool = False

    allow_expand = False

    def get_node_kind(self) -> str:
        return "table"

    @property
    def node_id(self) -> str:
        return f"{self.server_name}{DATABASE_ID_SEPARATOR}{self.database}{DATABASE_ID_SEPARATOR}{self.row.schema}.{self.row.name}"

    @property
    def label(self) -> str:
        if self.is_duplicate:
            return f"{self.row.schema}.{self.row.name}"
        return self.row.name


@dataclass(frozen=True)
class RoutineNode:
    """A function or stored procedure."""

    server_name: str
    database: str
    row: RoutineRow
    is_duplicate: bool = False

    allow_expand = False

    def get_node_kind(self) -> str:
        return self.row.kind.value

    @property
    def node_id(self) -> str:
        return (
            f"{self.server_name}{DATABASE_ID_SEPARATOR}{self.database}{DATABASE_ID_SEPARATOR}"
            f"{self.row.schema}.{self.row.name}({self.row.args})"
        )

    @property
    def label(self) -> str:
        # Overloads and same-named routines in other schemas share a name.
        if self.is_duplicate:
            return f"{self.row.schema}.{self.row.name}({self.row.args})"
        return self.row.name

    @property
    def definition(self) -> str:
        return self.row.definition


CatalogNode = Union[ServerNode, DatabaseNode, FolderNode, TableNode, RoutineNode]

DATABASE_FOLDERS = (FolderKind.TABLES, FolderKind.FUNCTIONS, FolderKind.PROCEDURES)
