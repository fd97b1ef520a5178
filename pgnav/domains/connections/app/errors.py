"""Classification of connection failures into remediable kinds."""

from __future__ import annotations

from enum import Enum

from pgnav.shared.core.errors import MissingCredentialsError

INVALID_PASSWORD_SQLSTATE = "28P01"
INVALID_AUTHORIZATION_SQLSTATE = "28000"

# libpq reports connection-time failures without a SQLSTATE, so the server
# message text is matched as well.
CREDENTIAL_MESSAGES = (
    "password authentication failed",
    "no password supplied",
)
FIREWALL_MESSAGES = (
    "no pg_hba.conf entry",
    "is not allowed to connect",
)


class ConnectionErrorKind(Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    FIREWALL_NOT_CONFIGURED = "firewall_not_configured"
    OTHER = "other"


def classify_connection_error(error: BaseException) -> ConnectionErrorKind:
    """Map a connection error to exactly one kind; credentials win ties."""
    if isinstance(error, MissingCredentialsError):
        return ConnectionErrorKind.INVALID_CREDENTIALS

    pgcode = getattr(error, "pgcode", None)
    message = str(error).lower()

    if pgcode == INVALID_PASSWORD_SQLSTATE or any(text in message for text in CREDENTIAL_MESSAGES):
        return ConnectionErrorKind.INVALID_CREDENTIALS
    if pgcode == INVALID_AUTHORIZATION_SQLSTATE or any(text in message for text in FIREWALL_MESSAGES):
        return ConnectionErrorKind.FIREWALL_NOT_CONFIGURED
    return ConnectionErrorKind.OTHER
