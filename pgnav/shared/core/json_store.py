"""JSON file persistence used by the settings, connection and state stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Read and atomically write a single JSON document."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path

    def _read(self, default: Any) -> Any:
        if not self.file_path.exists():
            return default
        try:
            with self.file_path.open(encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable %s: %s", self.file_path, exc)
            return default

    def _write(self, data: Any) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.file_path.parent, prefix=f".{self.file_path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
