"""Test doubles for the driver, adapter and process runner."""

from __future__ import annotations

from typing import Any

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.explorer.domain.rows import RoutineKind, RoutineRow, TableRow
from pgnav.domains.query.app.results import QueryResult


class FakeCursor:
    """Context-manager cursor that replays canned rows."""

    def __init__(self, connection: FakeConnection) -> None:
        self.connection = connection
        self.description: list[tuple] | None = None
        self.rowcount = -1
        self.statusmessage: str | None = None
        self._rows: list[tuple] = []

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.connection.closed_cursors += 1

    def execute(self, query: Any, params: Any = None) -> None:
        self.connection.executed.append((query, params))
        response = self.connection.responses.pop(0) if self.connection.responses else {}
        columns = response.get("columns")
        self.description = [(column, None) for column in columns] if columns else None
        self._rows = list(response.get("rows", []))
        self.rowcount = response.get("rowcount", len(self._rows) if columns else -1)
        self.statusmessage = response.get("status")

    def fetchall(self) -> list[tuple]:
        return self._rows


class FakeConnection:
    def __init__(self, responses: list[dict] | None = None, server_version: int = 160000) -> None:
        self.responses = list(responses or [])
        self.server_version = server_version
        self.executed: list[tuple[Any, Any]] = []
        self.closed = False
        self.closed_cursors = 0
        self.autocommit = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


class FakeAdapter:
    """Adapter double recording every call; ``verify_errors`` are raised in order."""

    def __init__(self) -> None:
        self.databases: list[str] = []
        self.tables: list[TableRow] = []
        self.routines: dict[RoutineKind, list[RoutineRow]] = {RoutineKind.FUNCTION: [], RoutineKind.PROCEDURE: []}
        self.result = QueryResult(command="SELECT", row_count=0)
        self.verify_errors: list[BaseException] = []
        self.connected: list[ConnectionConfig] = []
        self.verified: list[ConnectionConfig] = []
        self.calls: list[tuple] = []
        self.connections: list[FakeConnection] = []

    def connect(self, config: ConnectionConfig) -> FakeConnection:
        self.connected.append(config)
        connection = FakeConnection()
        self.connections.append(connection)
        return connection

    def verify(self, config: ConnectionConfig) -> None:
        self.verified.append(config)
        if self.verify_errors:
            raise self.verify_errors.pop(0)

    def get_databases(self, conn: Any) -> list[str]:
        return list(self.databases)

    def get_tables(self, conn: Any) -> list[TableRow]:
        return list(self.tables)

    def get_routines(self, conn: Any, kind: RoutineKind) -> list[RoutineRow]:
        return list(self.routines[kind])

    def execute(self, conn: Any, query: str) -> QueryResult:
        self.calls.append(("execute", query))
        return self.result

    def create_database(self, conn: Any, name: str) -> None:
        self.calls.append(("create_database", name))

    def drop_database(self, conn: Any, name: str) -> None:
        self.calls.append(("drop_database", name))

    def drop_table(self, conn: Any, table: TableRow) -> None:
        self.calls.append(("drop_table", table))

    def drop_routine(self, conn: Any, routine: RoutineRow) -> None:
        self.calls.append(("drop_routine", routine))


class FakeProcess:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode: int | None = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.killed = False

    def communicate(self, timeout: float | None = None) -> tuple[str, str]:
        return self.stdout, self.stderr

    def kill(self) -> None:
        self.killed = True


class FakeRunner:
    def __init__(self, process: FakeProcess | None = None, error: OSError | None = None) -> None:
        self.process = process or FakeProcess()
        self.error = error
        self.commands: list[list[str]] = []

    def spawn(self, command: list[str], *, cwd: str | None = None) -> FakeProcess:
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return self.process


class PgError(Exception):
    """Stand-in for psycopg2.OperationalError carrying a SQLSTATE."""

    def __init__(self, message: str, pgcode: str | None = None) -> None:
        super().__init__(message)
        self.pgcode = pgcode


