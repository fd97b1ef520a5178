"""PostgreSQL adapter using psycopg2."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pgnav.domains.connections.providers.driver import import_driver_module
from pgnav.domains.connections.providers.postgresql import queries
from pgnav.domains.explorer.domain.rows import RoutineKind, RoutineRow, TableRow
from pgnav.domains.query.app.results import QueryResult, command_from_status
from pgnav.shared.core.errors import MissingCredentialsError

if TYPE_CHECKING:
    from pgnav.domains.connections.domain.config import ConnectionConfig

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_LENGTH = 63


class PostgreSQLAdapter:
    """Adapter for PostgreSQL using psycopg2."""

    connect_timeout = 10

    @property
    def name(self) -> str:
        return "PostgreSQL"

    @property
    def install_extra(self) -> str:
        return "postgres"

    @property
    def install_package(self) -> str:
        return "psycopg2-binary"

    def _import(self, module_name: str) -> Any:
        return import_driver_module(
            module_name,
            driver_name=self.name,
            extra_name=self.install_extra,
            package_name=self.install_package,
        )

    def connect(self, config: ConnectionConfig) -> Any:
        """Connect to the database ``config`` targets."""
        if not config.has_credentials:
            raise MissingCredentialsError(config.name)
        psycopg2 = self._import("psycopg2")
        logger.debug("Connecting to %s/%s as %s", config.display_host, config.database, config.username)
        conn = psycopg2.connect(
            host=config.host,
            port=int(config.port),
            dbname=config.database,
            user=config.username,
            password=config.password,
            sslmode=config.sslmode,
            connect_timeout=self.connect_timeout,
        )
        # CREATE/DROP DATABASE cannot run inside a transaction block
        conn.autocommit = True
        return conn

    def verify(self, config: ConnectionConfig) -> None:
        """Open and close one connection, raising whatever the driver raises."""
        conn = self.connect(config)
        conn.close()

    def get_databases(self, conn: Any) -> list[str]:
        with conn.cursor() as cursor:
            cursor.execute(queries.DATABASES_QUERY)
            return [row[0] for row in cursor.fetchall()]

    def get_tables(self, conn: Any) -> list[TableRow]:
        with conn.cursor() as cursor:
            cursor.execute(queries.TABLES_QUERY)
            return [TableRow(schema=row[0], name=row[1]) for row in cursor.fetchall()]

    def get_routines(self, conn: Any, kind: RoutineKind) -> list[RoutineRow]:
        """Get functions or stored procedures outside the system schemas."""
        server_version = int(getattr(conn, "server_version", 0) or 0)
        with conn.cursor() as cursor:
            if server_version and server_version < queries.PROKIND_MIN_SERVER_VERSION:
                if kind is RoutineKind.PROCEDURE:
                    return []
                cursor.execute(queries.LEGACY_FUNCTIONS_QUERY)
            else:
                cursor.execute(queries.ROUTINES_QUERY, (kind.prokind,))
            return [
                RoutineRow(
                    schema=row[0],
                    name=row[1],
                    args=row[2] or "",
                    definition=row[3] or "",
                    kind=kind,
                )
                for row in cursor.fetchall()
            ]

    def execute(self, conn: Any, query: str) -> QueryResult:
        with conn.cursor() as cursor:
            cursor.execute(query)
            columns = [column[0] for column in cursor.description] if cursor.description else []
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()] if columns else []
            row_count = cursor.rowcount if cursor.rowcount is not None and cursor.rowcount >= 0 else len(rows)
            return QueryResult(
                command=command_from_status(cursor.statusmessage),
                row_count=row_count,
                columns=columns,
                rows=rows,
            )

    def create_database(self, conn: Any, name: str) -> None:
        sql = self._import("psycopg2.sql")
        self._run(conn, sql.SQL("CREATE DATABASE {}").format(sql.Identifier(name)))

    def drop_database(self, conn: Any, name: str) -> None:
        sql = self._import("psycopg2.sql")
        self._run(conn, sql.SQL("DROP DATABASE {}").format(sql.Identifier(name)))

    def drop_table(self, conn: Any, table: TableRow) -> None:
        sql = self._import("psycopg2.sql")
        self._run(conn, sql.SQL("DROP TABLE {}.{}").format(sql.Identifier(table.schema), sql.Identifier(table.name)))

    def drop_routine(self, conn: Any, routine: RoutineRow) -> None:
        sql = self._import("psycopg2.sql")
        # args come from pg_get_function_identity_arguments and are already valid SQL
        statement = sql.SQL("DROP {} {}.{}({})").format(
            sql.SQL(routine.kind.sql_keyword),
            sql.Identifier(routine.schema),
            sql.Identifier(routine.name),
            sql.SQL(routine.args),
        )
        self._run(conn, statement)

    def _run(self, conn: Any, statement: Any) -> None:
        with conn.cursor() as cursor:
            cursor.execute(statement)


def validate_identifier(name: str) -> str | None:
    """Return an error message if ``name`` cannot be used as a database name."""
    if not name or not name.strip():
        return "Name cannot be empty."
    if len(name) > MAX_IDENTIFIER_LENGTH:
        return f"Name cannot be longer than {MAX_IDENTIFIER_LENGTH} characters."
    return None
