"""Main Textual application for pgnav."""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Footer, Static, TextArea, Tree

from pgnav.domains.connections.app.service import ConnectionService
from pgnav.domains.connections.ui.mixins.connection import ConnectionMixin
from pgnav.domains.explorer.app.catalog import CatalogWalker
from pgnav.domains.explorer.ui.mixins.tree import TreeMixin
from pgnav.domains.explorer.ui.widgets import ExplorerTree
from pgnav.domains.query.ui.mixins.query_execution import QueryExecutionMixin
from pgnav.domains.query.ui.mixins.query_results import QueryResultsMixin
from pgnav.domains.shell.app.keymap import get_action_bindings
from pgnav.shared.app.runtime import RuntimeConfig
from pgnav.shared.app.services import AppServices, build_app_services
from pgnav.shared.ui.widgets import ResultsTable


class PgnavApp(
    TreeMixin,
    ConnectionMixin,
    QueryExecutionMixin,
    QueryResultsMixin,
    App,
):
    """PostgreSQL explorer application."""

    TITLE = "pgnav"

    CSS = """
    Screen {
        background: $surface;
    }

    #content {
        height: 1fr;
    }

    #sidebar {
        width: 40;
        border: round $border;
        border-title-align: left;
        padding: 0 1;
    }

    #object-tree {
        height: 1fr;
    }

    #main-panel {
        width: 1fr;
    }

    #query-area {
        height: 50%;
        border: round $border;
        border-title-align: left;
    }

    #query-input {
        height: 1fr;
        border: none;
    }

    #results-area {
        height: 1fr;
        border: round $border;
        border-title-align: left;
    }

    DataTable > .datatable--header {
        background: $surface-lighten-1;
        color: $primary;
        text-style: bold;
    }

    #status-bar {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """

    BINDINGS: ClassVar[list[Any]] = list(get_action_bindings("global"))

    def __init__(self, services: AppServices | None = None):
        super().__init__()
        self.services = services or build_app_services(RuntimeConfig.from_env())
        self.connection_service = ConnectionService(self.services)
        self.walker = CatalogWalker(self.connection_service.adapter)
        self.connected_database: tuple[str, str] | None = None
        self.query_path: Path | None = None
        self.query_executing = False
        self._loading_nodes: set[str] = set()
        self._results_table_counter = 0

    @property
    def object_tree(self) -> Tree:
        return self.query_one("#object-tree", Tree)

    @property
    def query_input(self) -> TextArea:
        return self.query_one("#query-input", TextArea)

    @property
    def results_table(self) -> ResultsTable:
        # The id changes every time the table is replaced.
        return self.query_one("#results-area ResultsTable", ResultsTable)

    @property
    def results_area(self) -> Any:
        return self.query_one("#results-area")

    @property
    def status_bar(self) -> Static:
        return self.query_one("#status-bar", Static)

    def compose(self) -> ComposeResult:
        with Horizontal(id="content"):
            with Vertical(id="sidebar"):
                tree = ExplorerTree("Servers", id="object-tree")
                tree.show_root = False
                tree.guide_depth = 2
                yield tree

            with Vertical(id="main-panel"):
                with Container(id="query-area"):
                    yield TextArea("", language="sql", id="query-input")
                with Container(id="results-area"):
                    yield ResultsTable(id="results-table", zebra_stripes=True, show_header=False)

        yield Static("Not connected", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#sidebar").border_title = "Servers"
        self.query_one("#query-area").border_title = "Query"
        self.results_area.border_title = "Results"
        self._load_persisted_database()
        self._populate_servers()
        self._update_status_bar()
        self.object_tree.focus()
