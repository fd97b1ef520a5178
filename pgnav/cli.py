"""Command-line entry point for pgnav."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.tree import Tree

from pgnav import __version__
from pgnav.domains.connections.app.service import ConnectionService
from pgnav.domains.connections.domain.config import DEFAULT_DATABASE, DEFAULT_PORT, SSL_MODES, ConnectionConfig
from pgnav.domains.connections.providers.postgresql.adapter import validate_identifier
from pgnav.domains.connections.ui.console import ConsoleRemediation
from pgnav.domains.explorer.app.catalog import CatalogWalker
from pgnav.domains.explorer.domain.nodes import (
    DatabaseNode,
    FolderKind,
    FolderNode,
    RoutineNode,
    ServerNode,
    TableNode,
)
from pgnav.domains.query.app.executor import run_query_file
from pgnav.domains.query.app.templates import (
    default_function_query,
    validate_function_name,
    validate_return_type,
)
from pgnav.shared.app.log_setup import configure_logging
from pgnav.shared.app.runtime import RuntimeConfig
from pgnav.shared.app.services import AppServices, build_app_services
from pgnav.shared.core.errors import NotConnectedError, PgnavError

logger = logging.getLogger(__name__)


class CommandContext:
    """Per-invocation helpers shared by the subcommands."""

    def __init__(self, services: AppServices, console: Console, *, save_password: bool = False) -> None:
        self.services = services
        self.console = console
        self.connections = ConnectionService(services)
        self.walker = CatalogWalker(self.connections.adapter)
        self.remediation = ConsoleRemediation(
            self.connections,
            services.create_firewall_configurator(),
            console,
            save_password=save_password,
        )

    def resolve(self, server_name: str, database: str | None = None) -> ConnectionConfig:
        server = self.connections.get_server(server_name)
        return asyncio.run(self.connections.resolve(server, database or server.database, self.remediation))

    def confirm(self, message: str, assume_yes: bool) -> bool:
        if assume_yes:
            return True
        return Confirm.ask(message, default=False, console=self.console)

    def find_routines(self, config: ConnectionConfig, kind: FolderKind, name: str, args: str | None) -> list[RoutineNode]:
        folder = FolderNode(server_name=config.name, database=config.database, folder=kind)
        schema, _, name = name.rpartition(".")
        matches = [
            node
            for node in self.walker.list_children(folder, config)
            if isinstance(node, RoutineNode) and node.row.name == name and (not schema or node.row.schema == schema)
        ]
        if args is not None:
            matches = [node for node in matches if node.row.args == args]
        return matches

    def find_routine(self, config: ConnectionConfig, kind: FolderKind, name: str, args: str | None) -> RoutineNode:
        matches = self.find_routines(config, kind, name, args)
        if not matches:
            raise PgnavError(f'No {kind.child_label.lower()} named "{name}" in {config.database}.')
        if len(matches) > 1:
            overloads = ", ".join(f"{node.row.schema}.{node.row.name}({node.row.args})" for node in matches)
            raise PgnavError(f'"{name}" is overloaded: {overloads}. Use SCHEMA.NAME or --args to pick one.')
        return matches[0]


def _cmd_ui(ctx: CommandContext, args: argparse.Namespace) -> int:
    from pgnav.domains.shell.app.main import PgnavApp

    PgnavApp(services=ctx.services).run()
    return 0


def _cmd_server_add(ctx: CommandContext, args: argparse.Namespace) -> int:
    password = args.password or ""
    if args.ask_password:
        password = Prompt.ask("Password", password=True, console=ctx.console)
    sslmode = args.sslmode or ctx.services.settings_store.get("default_sslmode", "prefer")
    config = ConnectionConfig(
        name=args.name,
        host=args.host,
        port=str(args.port),
        username=args.user or "",
        password=password,
        sslmode=sslmode,
        database=args.database,
    )
    ctx.connections.add_server(config, save_password=args.save_password)
    ctx.console.print(f"Added server [bold]{escape(config.name)}[/] ({escape(config.display_host)})")
    return 0


def _cmd_server_remove(ctx: CommandContext, args: argparse.Namespace) -> int:
    ctx.connections.get_server(args.name)
    if not ctx.confirm(f'Remove server "{args.name}"?', args.yes):
        return 1
    ctx.connections.remove_server(args.name)
    ctx.console.print(f"Removed server [bold]{escape(args.name)}[/]")
    return 0


def _cmd_server_list(ctx: CommandContext, args: argparse.Namespace) -> int:
    servers = ctx.connections.list_servers()
    if not servers:
        ctx.console.print("No servers registered. Add one with: pgnav server add NAME --host HOST")
        return 0
    for server in servers:
        user = server.username or "<no user>"
        ctx.console.print(f"{escape(server.name)}\t{escape(user)}@{escape(server.display_host)}\tsslmode={server.sslmode}")
    return 0


def _cmd_credentials(ctx: CommandContext, args: argparse.Namespace) -> int:
    server = ctx.connections.get_server(args.name)
    asyncio.run(ctx.remediation.enter_credentials(server))
    ctx.console.print(f"Updated credentials for [bold]{escape(args.name)}[/]")
    return 0


def _cmd_firewall(ctx: CommandContext, args: argparse.Namespace) -> int:
    server = ctx.connections.get_server(args.name)
    asyncio.run(ctx.remediation.configure_firewall(server))
    return 0


def _cmd_tree(ctx: CommandContext, args: argparse.Namespace) -> int:
    server = ctx.connections.get_server(args.server)
    root = Tree(f"[bold]{escape(server.name)}[/] [dim]{escape(server.display_host)}[/]")
    if args.database:
        config = ctx.resolve(args.server, args.database)
        database_node = DatabaseNode(server_name=server.name, database=args.database)
        db_branch = root.add(escape(args.database))
        for folder in ctx.walker.list_children(database_node, config):
            branch = db_branch.add(f"[bold]{escape(folder.label)}[/]")
            for child in ctx.walker.list_children(folder, config):
                branch.add(escape(child.label))
    else:
        config = ctx.resolve(args.server)
        for child in ctx.walker.list_children(ServerNode(config), config):
            root.add(escape(child.label))
    ctx.console.print(root)
    return 0


def _cmd_db_create(ctx: CommandContext, args: argparse.Namespace) -> int:
    error = validate_identifier(args.name)
    if error:
        raise PgnavError(error)
    config = ctx.resolve(args.server)
    ctx.connections.create_database(config, args.name)
    ctx.console.print(f"Created database [bold]{escape(args.name)}[/]")
    return 0


def _cmd_db_drop(ctx: CommandContext, args: argparse.Namespace) -> int:
    if not ctx.confirm(f'Drop database "{args.name}" on "{args.server}"? This cannot be undone.', args.yes):
        return 1
    config = ctx.resolve(args.server)
    ctx.connections.drop_database(config, args.name)
    ctx.console.print(f"Dropped database [bold]{escape(args.name)}[/]")
    return 0


def _cmd_table_drop(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.resolve(args.server, args.database)
    schema, _, name = args.table.rpartition(".")
    folder = FolderNode(server_name=config.name, database=config.database, folder=FolderKind.TABLES)
    matches = [
        node
        for node in ctx.walker.list_children(folder, config)
        if isinstance(node, TableNode) and node.row.name == name and (not schema or node.row.schema == schema)
    ]
    if not matches:
        raise PgnavError(f'No table named "{args.table}" in {config.database}.')
    if len(matches) > 1:
        schemas = ", ".join(node.row.schema for node in matches)
        raise PgnavError(f'"{name}" exists in several schemas ({schemas}). Use SCHEMA.NAME.')
    table = matches[0]
    if not ctx.confirm(f'Drop table "{table.row.schema}.{table.row.name}"? This cannot be undone.', args.yes):
        return 1
    ctx.connections.drop_table(config, table)
    ctx.console.print(f"Dropped table [bold]{escape(table.row.schema)}.{escape(table.row.name)}[/]")
    return 0


def _routine_folder(args: argparse.Namespace) -> FolderKind:
    return FolderKind.PROCEDURES if args.procedure else FolderKind.FUNCTIONS


def _cmd_function_show(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.resolve(args.server, args.database)
    node = ctx.find_routine(config, _routine_folder(args), args.name, args.args)
    ctx.console.print(node.definition, markup=False, highlight=False)
    return 0


def _cmd_function_drop(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.resolve(args.server, args.database)
    node = ctx.find_routine(config, _routine_folder(args), args.name, args.args)
    if not ctx.confirm(f'Drop {node.row.kind.value} "{node.row.name}({node.row.args})"? This cannot be undone.', args.yes):
        return 1
    ctx.connections.drop_routine(config, node)
    ctx.console.print(f"Dropped {node.row.kind.value} [bold]{escape(node.row.name)}[/]")
    return 0


def _cmd_function_new(ctx: CommandContext, args: argparse.Namespace) -> int:
    error = validate_function_name(args.name) or validate_return_type(args.return_type)
    if error:
        raise PgnavError(error)
    query = default_function_query(args.name, args.return_type)
    if args.output:
        output = Path(args.output)
        if output.exists() and not ctx.confirm(f'Overwrite "{output}"?', args.yes):
            return 1
        output.write_text(query, encoding="utf-8")
        ctx.console.print(f'Wrote "{escape(str(output))}"')
    else:
        sys.stdout.write(query)
    return 0


def _cmd_connect(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.resolve(args.server, args.database)
    server = ctx.connections.get_server(args.server)
    database_id = ctx.connections.connect_database(server, config.database)
    ctx.console.print(f"Connected to [bold]{escape(database_id)}[/]")
    return 0


def _cmd_disconnect(ctx: CommandContext, args: argparse.Namespace) -> int:
    ctx.connections.disconnect()
    ctx.console.print("Disconnected")
    return 0


def _cmd_status(ctx: CommandContext, args: argparse.Namespace) -> int:
    connected = ctx.connections.connected_database()
    if connected is None:
        ctx.console.print("Not connected")
    else:
        server, database = connected
        ctx.console.print(f"Connected to [bold]{escape(server.database_id(database))}[/] ({escape(server.display_host)})")
    return 0


def _cmd_exec(ctx: CommandContext, args: argparse.Namespace) -> int:
    source = Path(args.file)
    if args.server:
        server = ctx.connections.get_server(args.server)
        database = args.database or server.database
    else:
        connected = ctx.connections.connected_database()
        if connected is None:
            raise NotConnectedError()
        server, database = connected
        database = args.database or database
    config = ctx.resolve(server.name, database)
    _, status = run_query_file(ctx.connections.adapter, config, source)
    ctx.console.print(status, markup=False, highlight=False)
    return 0


def _add_save_password(parser: argparse.ArgumentParser, default: Any = argparse.SUPPRESS) -> None:
    # Subcommand defaults would override a flag given before the subcommand.
    parser.add_argument(
        "--save-password",
        action="store_true",
        default=default,
        help="Persist passwords entered at prompts in connections.json",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pgnav", description="Browse and query PostgreSQL servers.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Verbose logging to the log file")
    _add_save_password(parser, default=False)
    parser.set_defaults(handler=_cmd_ui)
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("ui", help="Open the explorer (default)").set_defaults(handler=_cmd_ui)

    server = sub.add_parser("server", help="Manage registered servers")
    server_sub = server.add_subparsers(dest="server_command", required=True)
    add = server_sub.add_parser("add", help="Register a server")
    add.add_argument("name")
    add.add_argument("--host", default="localhost")
    add.add_argument("--port", type=int, default=int(DEFAULT_PORT))
    add.add_argument("--user", default="")
    add.add_argument("--password", default="")
    add.add_argument("--ask-password", action="store_true", help="Prompt for the password")
    add.add_argument("--sslmode", choices=SSL_MODES)
    add.add_argument("--database", default=DEFAULT_DATABASE, help="Maintenance database")
    _add_save_password(add)
    add.set_defaults(handler=_cmd_server_add)
    remove = server_sub.add_parser("remove", help="Remove a registered server")
    remove.add_argument("name")
    remove.add_argument("-y", "--yes", action="store_true")
    remove.set_defaults(handler=_cmd_server_remove)
    server_sub.add_parser("list", help="List registered servers").set_defaults(handler=_cmd_server_list)

    credentials = sub.add_parser("credentials", help="Enter credentials for a server")
    credentials.add_argument("name")
    _add_save_password(credentials)
    credentials.set_defaults(handler=_cmd_credentials)

    firewall = sub.add_parser("firewall", help="Allow this client through a server's firewall")
    firewall.add_argument("name")
    firewall.set_defaults(handler=_cmd_firewall)

    tree = sub.add_parser("tree", help="Print a server's catalog")
    tree.add_argument("server")
    tree.add_argument("-d", "--database")
    tree.set_defaults(handler=_cmd_tree)

    db = sub.add_parser("db", help="Create or drop databases")
    db_sub = db.add_subparsers(dest="db_command", required=True)
    db_create = db_sub.add_parser("create")
    db_create.add_argument("server")
    db_create.add_argument("name")
    db_create.set_defaults(handler=_cmd_db_create)
    db_drop = db_sub.add_parser("drop")
    db_drop.add_argument("server")
    db_drop.add_argument("name")
    db_drop.add_argument("-y", "--yes", action="store_true")
    db_drop.set_defaults(handler=_cmd_db_drop)

    table = sub.add_parser("table", help="Drop tables")
    table_sub = table.add_subparsers(dest="table_command", required=True)
    table_drop = table_sub.add_parser("drop")
    table_drop.add_argument("server")
    table_drop.add_argument("database")
    table_drop.add_argument("table", help="NAME or SCHEMA.NAME")
    table_drop.add_argument("-y", "--yes", action="store_true")
    table_drop.set_defaults(handler=_cmd_table_drop)

    function = sub.add_parser("function", help="Show, drop or create functions")
    function_sub = function.add_subparsers(dest="function_command", required=True)
    for action, handler in (("show", _cmd_function_show), ("drop", _cmd_function_drop)):
        routine = function_sub.add_parser(action)
        routine.add_argument("server")
        routine.add_argument("database")
        routine.add_argument("name", help="NAME or SCHEMA.NAME")
        routine.add_argument("--args", help="Identity argument list, e.g. 'integer, text'")
        routine.add_argument("--procedure", action="store_true", help="Target a stored procedure")
        if action == "drop":
            routine.add_argument("-y", "--yes", action="store_true")
        routine.set_defaults(handler=handler)
    new = function_sub.add_parser("new", help="Write a function stub")
    new.add_argument("name")
    new.add_argument("return_type")
    new.add_argument("-o", "--output", help="File to write (stdout if omitted)")
    new.add_argument("-y", "--yes", action="store_true")
    new.set_defaults(handler=_cmd_function_new)

    connect = sub.add_parser("connect", help="Set the connected database")
    connect.add_argument("server")
    connect.add_argument("database")
    connect.set_defaults(handler=_cmd_connect)
    sub.add_parser("disconnect", help="Forget the connected database").set_defaults(handler=_cmd_disconnect)
    sub.add_parser("status", help="Show the connected database").set_defaults(handler=_cmd_status)

    execute = sub.add_parser("exec", help="Execute a SQL file and export rows to CSV")
    execute.add_argument("file")
    execute.add_argument("-s", "--server")
    execute.add_argument("-d", "--database")
    execute.set_defaults(handler=_cmd_exec)

    return parser


def main(argv: list[str] | None = None, *, services: AppServices | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    runtime = services.runtime if services is not None else RuntimeConfig.from_env()
    if args.debug:
        runtime.debug_mode = True
    configure_logging(runtime)
    services = services or build_app_services(runtime)

    console = Console()
    error_console = Console(stderr=True)
    ctx = CommandContext(services, console, save_password=args.save_password)
    handler: Any = args.handler
    try:
        return int(handler(ctx, args) or 0)
    except KeyboardInterrupt:
        error_console.print("[red]error:[/] interrupted")
        return 130
    except PgnavError as exc:
        logger.info("Command failed: %s", exc)
        error_console.print(f"[red]error:[/] {escape(str(exc))}")
        return 1
    except Exception as exc:
        logger.exception("Command failed")
        message = str(exc).strip().splitlines()[0] if str(exc).strip() else type(exc).__name__
        error_console.print(f"[red]error:[/] {escape(message)}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
