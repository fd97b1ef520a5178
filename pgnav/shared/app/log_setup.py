"""Logging setup for the CLI and the explorer app."""

from __future__ import annotations

import logging

from pgnav.shared.app.runtime import RuntimeConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(runtime: RuntimeConfig) -> None:
    """Send pgnav logs to a file; the terminal belongs to the UI."""
    level = logging.DEBUG if runtime.debug_mode else logging.INFO
    log_path = runtime.log_path
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("pgnav")
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
