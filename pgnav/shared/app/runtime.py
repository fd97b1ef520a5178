"""Runtime configuration for pgnav."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_DIR = Path("~/.pgnav")


@dataclass
class RuntimeConfig:
    """Runtime configuration provided by CLI or tests."""

    config_dir: Path = DEFAULT_CONFIG_DIR.expanduser()
    max_rows: int | None = None
    debug_mode: bool = False
    log_file: Path | None = None

    @property
    def settings_path(self) -> Path:
        return self.config_dir / "settings.json"

    @property
    def connections_path(self) -> Path:
        return self.config_dir / "connections.json"

    @property
    def state_path(self) -> Path:
        return self.config_dir / "state.json"

    @property
    def log_path(self) -> Path:
        return self.log_file or self.config_dir / "pgnav.log"

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        def _parse_int(value: str | None) -> int | None:
            if not value:
                return None
            try:
                return int(value)
            except (TypeError, ValueError):
                return None

        config_dir = os.environ.get("PGNAV_CONFIG_DIR", "").strip()
        log_file = os.environ.get("PGNAV_LOG_FILE", "").strip()
        max_rows = _parse_int(os.environ.get("PGNAV_MAX_ROWS"))

        return cls(
            config_dir=Path(config_dir).expanduser() if config_dir else DEFAULT_CONFIG_DIR.expanduser(),
            max_rows=max_rows if max_rows and max_rows > 0 else None,
            debug_mode=os.environ.get("PGNAV_DEBUG") == "1",
            log_file=Path(log_file).expanduser() if log_file else None,
        )
