"""Short-lived connection sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pgnav.domains.connections.domain.config import ConnectionConfig

logger = logging.getLogger(__name__)


class ConnectionSession:
    """Owns one driver connection for the duration of a ``with`` block.

    Every catalog expand and every query opens its own session; nothing is
    pooled or cached between operations.
    """

    def __init__(self, config: ConnectionConfig, adapter: Any) -> None:
        self.config = config
        self.adapter = adapter
        self.connection: Any | None = None

    def __enter__(self) -> ConnectionSession:
        self.connection = self.adapter.connect(self.config)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self.connection is None:
            return
        try:
            self.connection.close()
        except Exception as exc:
            logger.debug("Ignoring error while closing connection: %s", exc)
        self.connection = None
