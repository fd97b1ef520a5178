"""Protocols describing the app surface the UI mixins rely on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from textual.widgets import Static, TextArea, Tree
    from textual.widgets.tree import TreeNode

    from pgnav.domains.connections.app.service import ConnectionService
    from pgnav.domains.connections.domain.config import ConnectionConfig
    from pgnav.domains.explorer.app.catalog import CatalogWalker
    from pgnav.domains.query.app.results import QueryResult
    from pgnav.shared.app.services import AppServices
    from pgnav.shared.ui.widgets import ResultsTable


class AppStateProtocol(Protocol):
    services: AppServices
    connection_service: ConnectionService
    walker: CatalogWalker
    connected_database: tuple[str, str] | None
    query_path: Path | None
    query_executing: bool
    _loading_nodes: set[str]
    _results_table_counter: int


class AppWidgetsProtocol(Protocol):
    @property
    def object_tree(self) -> Tree: ...

    @property
    def query_input(self) -> TextArea: ...

    @property
    def results_table(self) -> ResultsTable: ...

    @property
    def results_area(self) -> Any: ...

    @property
    def status_bar(self) -> Static: ...


class AppActionsProtocol(Protocol):
    @property
    def log(self) -> Any: ...

    def notify(self, message: str, *, title: str = "", severity: str = "information", timeout: float | None = None) -> None: ...

    def run_worker(self, work: Any, name: str | None = "", group: str = "default", description: str = "", exit_on_error: bool = True, start: bool = True, exclusive: bool = False, thread: bool = False) -> Any: ...

    async def push_screen_wait(self, screen: Any) -> Any: ...

    def push_screen(self, screen: Any, callback: Any = None, wait_for_dismiss: bool = False) -> Any: ...

    def _populate_servers(self) -> None: ...

    def _reload_node(self, node: TreeNode[Any]) -> None: ...

    def _resolve_config(self, server_name: str, database: str | None = None) -> Any: ...

    def _update_status_bar(self) -> None: ...

    def _show_error(self, error: BaseException, context: str) -> None: ...

    def _selected_server(self) -> ConnectionConfig | None: ...

    def _selected_data(self) -> Any: ...

    def _format_node_label(self, data: Any) -> str: ...

    def _load_children(self, node: TreeNode[Any]) -> None: ...

    def _display_query_results(self, result: QueryResult, status: str) -> None: ...


class AppProtocol(AppStateProtocol, AppWidgetsProtocol, AppActionsProtocol, Protocol):
    """Composite protocol for the pgnav app mixins."""

    pass
