"""Shared widgets."""

from __future__ import annotations

from textual_fastdatatable import DataTable


class ResultsTable(DataTable):
    """Results grid for query output."""

    DEFAULT_CSS = """
    ResultsTable {
        height: 1fr;
    }
    """
