"""Result rendering for executed queries."""

from __future__ import annotations

from pgnav.domains.query.app.results import QueryResult
from pgnav.shared.ui.protocols import AppProtocol
from pgnav.shared.ui.widgets import ResultsTable

MAX_RENDER_ROWS = 100000
MAX_COLUMN_CONTENT_WIDTH = 100


class QueryResultsMixin:
    """Mixin providing results rendering for queries."""

    _results_table_counter: int = 0

    def _render_limit(self: AppProtocol) -> int:
        return self.services.runtime.max_rows or MAX_RENDER_ROWS

    def _display_query_results(self: AppProtocol, result: QueryResult, status: str) -> None:
        if result.columns:
            self._replace_results_table(result.columns, result.as_tuples()[: self._render_limit()])
        else:
            self._replace_results_table(["Result"], [(status,)])

    def _replace_results_table(self: AppProtocol, columns: list[str], rows: list[tuple]) -> None:
        """Swap the results table for a freshly built one."""
        container = self.results_area
        old_table = self.results_table
        was_focused = old_table.has_focus
        self._results_table_counter += 1
        new_table = ResultsTable(
            id=f"results-table-{self._results_table_counter}",
            zebra_stripes=True,
            data=rows,
            column_labels=columns,
            max_column_content_width=MAX_COLUMN_CONTENT_WIDTH,
            render_markup=False,
            null_rep="NULL",
        )
        container.mount(new_table, after=old_table)
        old_table.remove()
        if was_focused:
            new_table.focus()
