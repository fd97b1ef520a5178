"""Rows returned by the catalog metadata queries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RoutineKind(str, Enum):
    FUNCTION = "function"
    PROCEDURE = "procedure"

    @property
    def prokind(self) -> str:
        return "f" if self is RoutineKind.FUNCTION else "p"

    @property
    def sql_keyword(self) -> str:
        return "FUNCTION" if self is RoutineKind.FUNCTION else "PROCEDURE"


@dataclass(frozen=True)
class TableRow:
    schema: str
    name: str


@dataclass(frozen=True)
class RoutineRow:
    schema: str
    name: str
    args: str
    definition: str
    kind: RoutineKind = RoutineKind.FUNCTION
