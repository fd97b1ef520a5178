"""Driver import helpers."""

from __future__ import annotations

import importlib
import os
from typing import Any

from pgnav.domains.connections.providers.exceptions import MissingDriverError


def import_driver_module(
    module_name: str,
    *,
    driver_name: str,
    extra_name: str,
    package_name: str,
) -> Any:
    """Import a driver module, raising MissingDriverError with detail if it fails."""
    if os.environ.get("PGNAV_MOCK_DRIVER_ERROR"):
        raise MissingDriverError(
            driver_name,
            extra_name,
            package_name,
            module_name=module_name,
            import_error=f"No module named '{module_name}'",
        )

    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise MissingDriverError(
            driver_name,
            extra_name,
            package_name,
            module_name=module_name,
            import_error=str(e),
        ) from e
