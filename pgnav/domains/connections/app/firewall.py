"""Firewall configuration through a user-supplied command."""

from __future__ import annotations

import logging
from typing import Any

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.shared.core.errors import FirewallConfigurationError
from pgnav.shared.core.processes import SubprocessRunner, SyncProcessRunner, run_to_completion

logger = logging.getLogger(__name__)

FIREWALL_COMMAND_TIMEOUT = 120.0


class FirewallConfigurator:
    """Runs the ``firewall_command`` setting for a server.

    The command is an argv list; ``{server}``, ``{host}`` and ``{port}`` in any
    argument are replaced with the server's values, e.g.
    ``["az", "postgres", "server", "firewall-rule", "create", "--server", "{server}", ...]``.
    """

    def __init__(self, command: list[str] | None, runner: SyncProcessRunner | None = None) -> None:
        self.command = [str(part) for part in command or []]
        self.runner = runner or SubprocessRunner()

    @classmethod
    def from_settings(cls, settings: dict[str, Any], runner: SyncProcessRunner | None = None) -> FirewallConfigurator:
        command = settings.get("firewall_command") or []
        if isinstance(command, str):
            command = command.split()
        return cls(list(command), runner)

    @property
    def is_configured(self) -> bool:
        return bool(self.command)

    def build_command(self, server: ConnectionConfig) -> list[str]:
        values = {"{server}": server.name, "{host}": server.host, "{port}": server.port}
        command = []
        for part in self.command:
            for placeholder, value in values.items():
                part = part.replace(placeholder, value)
            command.append(part)
        return command

    def configure(self, server: ConnectionConfig) -> str:
        """Run the command, returning its stdout. Raises FirewallConfigurationError."""
        if not self.is_configured:
            raise FirewallConfigurationError("No firewall_command is configured in settings.json.")
        command = self.build_command(server)
        logger.info("Configuring firewall for %s: %s", server.name, command[0])
        try:
            outcome = run_to_completion(self.runner, command, timeout=FIREWALL_COMMAND_TIMEOUT)
        except OSError as exc:
            raise FirewallConfigurationError(f"Could not run {command[0]}: {exc}") from exc
        if outcome.returncode != 0:
            detail = outcome.stderr.strip() or outcome.stdout.strip() or f"exit code {outcome.returncode}"
            raise FirewallConfigurationError(f"Firewall command failed: {detail}")
        return outcome.stdout
