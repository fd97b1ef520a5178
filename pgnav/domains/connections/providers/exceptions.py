"""Provider-level exceptions."""

from __future__ import annotations

from pgnav.shared.core.errors import PgnavError


class MissingDriverError(PgnavError):
    """Raised when the database driver package cannot be imported."""

    def __init__(
        self,
        driver_name: str,
        extra_name: str,
        package_name: str,
        *,
        module_name: str | None = None,
        import_error: str | None = None,
    ) -> None:
        self.driver_name = driver_name
        self.extra_name = extra_name
        self.package_name = package_name
        self.module_name = module_name
        self.import_error = import_error
        message = f"{driver_name} driver is not installed. Install it with: pip install {package_name}"
        if import_error:
            message = f"{message} ({import_error})"
        super().__init__(message)
