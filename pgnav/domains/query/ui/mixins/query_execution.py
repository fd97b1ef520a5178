"""Query editing and execution for the app."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from pgnav.domains.query.app.executor import execute_query, export_results, format_status
from pgnav.domains.query.app.templates import default_function_query
from pgnav.domains.query.ui.screens import FunctionQueryScreen
from pgnav.shared.core.errors import NoQueryError, RemediationCancelled
from pgnav.shared.core.utils import format_duration_ms
from pgnav.shared.ui.dialogs import TextPromptScreen
from pgnav.shared.ui.protocols import AppProtocol

UNTITLED_QUERY_NAME = "untitled.sql"


def _existing_file_error(value: str) -> str | None:
    if not value:
        return "Path cannot be empty."
    if not Path(value).expanduser().is_file():
        return f"No such file: {value}"
    return None


def _path_error(value: str) -> str | None:
    return "Path cannot be empty." if not value else None


class QueryExecutionMixin:
    """Mixin providing the query editor actions."""

    query_path: Path | None = None
    query_executing: bool = False

    def _set_query(self: AppProtocol, text: str, path: Path | None) -> None:
        self.query_input.text = text
        self.query_path = path
        self._update_status_bar()
        self.query_input.focus()

    def action_new_function_query(self: AppProtocol) -> None:
        self.run_worker(self._new_function_query_async(), name="new-function", group="query")

    async def _new_function_query_async(self: AppProtocol) -> None:
        result = await self.push_screen_wait(FunctionQueryScreen())
        if result is None:
            return
        name, return_type = result
        self._set_query(default_function_query(name, return_type), None)

    def action_open_query(self: AppProtocol) -> None:
        self.run_worker(self._open_query_async(), name="open-query", group="query")

    async def _open_query_async(self: AppProtocol) -> None:
        value = await self.push_screen_wait(
            TextPromptScreen(
                "Open query file",
                value=str(self.query_path or ""),
                placeholder="query.sql",
                validator=_existing_file_error,
            )
        )
        if value is None:
            return
        path = Path(value).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self._show_error(exc, f"Could not open {path}")
            return
        self._set_query(text, path)

    def action_save_query(self: AppProtocol) -> None:
        self.run_worker(self._save_query_async(), name="save-query", group="query")

    async def _save_query_async(self: AppProtocol) -> None:
        path = self.query_path
        if path is None:
            value = await self.push_screen_wait(
                TextPromptScreen("Save query as", placeholder="query.sql", validator=_path_error)
            )
            if value is None:
                return
            path = Path(value).expanduser()
        try:
            path.write_text(self.query_input.text, encoding="utf-8")
        except OSError as exc:
            self._show_error(exc, f"Could not save {path}")
            return
        self.query_path = path
        self._update_status_bar()
        self.notify(f"Saved {path}")

    def action_execute_query(self: AppProtocol) -> None:
        query = self.query_input.text
        if not query.strip():
            self.notify(str(NoQueryError()), severity="error")
            return
        if self.query_executing:
            self.notify("A query is already running", severity="warning")
            return
        target = self.connected_database
        if target is None:
            self.notify("Connect to a database first (select it and press c)", severity="warning")
            return
        self.query_executing = True
        self._update_status_bar()
        self.run_worker(
            self._execute_query_async(query, *target),
            name="query_execution",
            group="query",
            exclusive=True,
        )

    async def _execute_query_async(self: AppProtocol, query: str, server_name: str, database: str) -> None:
        source = self.query_path or Path.cwd() / UNTITLED_QUERY_NAME
        try:
            config = await self._resolve_config(server_name, database)
            start = time.perf_counter()
            result = await asyncio.to_thread(execute_query, self.connection_service.adapter, config, query)
            elapsed_ms = (time.perf_counter() - start) * 1000
            output_path = await asyncio.to_thread(export_results, result, source)
        except RemediationCancelled as exc:
            self.notify(str(exc), severity="warning")
            return
        except Exception as exc:
            self._show_error(exc, "Query failed")
            return
        finally:
            self.query_executing = False
            self._update_status_bar()

        status = format_status(result, output_path)
        self._display_query_results(result, status)
        self.notify(status, title=format_duration_ms(elapsed_ms))
        self.log.debug(f"Executed query on {server_name}/{database} in {elapsed_ms:.0f}ms")
