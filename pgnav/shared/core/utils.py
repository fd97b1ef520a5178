"""Small formatting helpers."""

from __future__ import annotations


def format_duration_ms(elapsed_ms: float) -> str:
    """Format a duration for status messages (e.g. ``12ms`` or ``1.50s``)."""
    if elapsed_ms < 1000:
        return f"{elapsed_ms:.0f}ms"
    return f"{elapsed_ms / 1000:.2f}s"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"
