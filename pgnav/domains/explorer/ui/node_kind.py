"""Helpers for reading catalog data off tree nodes."""

from __future__ import annotations

from typing import Any


def get_node_kind(node: Any) -> str:
    data = getattr(node, "data", None)
    if data is None:
        return ""
    getter = getattr(data, "get_node_kind", None)
    if callable(getter):
        return str(getter())
    return ""


def database_scope(data: Any) -> tuple[str, str | None] | None:
    """Return ``(server_name, database)`` for a catalog node; database is None for servers."""
    if data is None:
        return None
    server_name = getattr(data, "server_name", None)
    if server_name is None:
        return None
    return server_name, getattr(data, "database", None)
