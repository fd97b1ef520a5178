"""Exception hierarchy shared across pgnav domains."""

from __future__ import annotations


class PgnavError(Exception):
    """Base class for errors pgnav reports to the user as-is."""


class MissingCredentialsError(PgnavError):
    """Raised when a server has no stored username or password."""

    def __init__(self, server_name: str) -> None:
        super().__init__(f'No credentials stored for server "{server_name}".')
        self.server_name = server_name


class RemediationCancelled(PgnavError):
    """Raised when the user aborts a credential or firewall prompt."""


class FirewallConfigurationError(PgnavError):
    """Raised when the configured firewall command fails."""


class NoQueryError(PgnavError):
    """Raised when execution is requested without an open query."""

    def __init__(self) -> None:
        super().__init__("Open a PostgreSQL query before executing.")


class NotConnectedError(PgnavError):
    """Raised when a command needs a connected database and none is set."""

    def __init__(self) -> None:
        super().__init__("Connect to a PostgreSQL database first.")


class UnknownServerError(PgnavError):
    def __init__(self, name: str) -> None:
        super().__init__(f'Unknown server "{name}".')
        self.name = name
