"""Query result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class QueryResult:
    """Result of one executed statement batch.

    ``rows`` are mappings of column name to value; ``columns`` keeps the
    driver's field order, which is the order every consumer must follow.
    """

    command: str
    row_count: int
    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def has_rows(self) -> bool:
        return bool(self.columns) and bool(self.rows)

    def as_tuples(self) -> list[tuple[Any, ...]]:
        return [tuple(row.get(column) for column in self.columns) for row in self.rows]


def command_from_status(status: str | None) -> str:
    """Return the command tag of a driver status message (``"SELECT 3"`` -> ``"SELECT"``)."""
    if not status:
        return ""
    return status.split(None, 1)[0].upper()
