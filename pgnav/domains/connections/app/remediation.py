"""Connection remediation loop.

A connection attempt that fails because of missing or wrong credentials asks
the user for credentials; one that fails because the server rejects the
client's address runs the firewall step. Both retry afterwards, with no bound
on the number of attempts. Anything else propagates unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from pgnav.domains.connections.app.errors import ConnectionErrorKind, classify_connection_error
from pgnav.domains.connections.domain.config import ConnectionConfig

logger = logging.getLogger(__name__)

Probe = Callable[[ConnectionConfig], Awaitable[None]]


class RemediationHandler(Protocol):
    async def enter_credentials(self, server: ConnectionConfig) -> ConnectionConfig:
        """Prompt for credentials and return the updated server.

        Raises RemediationCancelled if the user aborts.
        """
        ...

    async def configure_firewall(self, server: ConnectionConfig) -> None:
        """Make the server accept this client. Raises RemediationCancelled on abort."""
        ...


async def obtain_client_config(
    server: ConnectionConfig,
    database: str,
    *,
    probe: Probe,
    remediation: RemediationHandler,
) -> ConnectionConfig:
    """Return a verified client config for ``database`` on ``server``."""
    attempt = 0
    while True:
        attempt += 1
        config = server.for_database(database)
        try:
            await probe(config)
        except Exception as exc:
            kind = classify_connection_error(exc)
            logger.info(
                "Connection attempt %d to %s failed (%s): %s",
                attempt,
                config.database_id(),
                kind.value,
                exc,
            )
            if kind is ConnectionErrorKind.INVALID_CREDENTIALS:
                server = await remediation.enter_credentials(server)
            elif kind is ConnectionErrorKind.FIREWALL_NOT_CONFIGURED:
                await remediation.configure_firewall(server)
            else:
                raise
        else:
            return config
