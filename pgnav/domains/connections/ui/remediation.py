"""Modal-dialog remediation for the explorer app."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.domains.connections.ui.screens import CredentialsScreen
from pgnav.shared.core.errors import RemediationCancelled
from pgnav.shared.ui.dialogs import ConfirmScreen

if TYPE_CHECKING:
    from pgnav.shared.ui.protocols import AppProtocol


class ScreenRemediation:
    """Runs remediation prompts as modal screens.

    Must be awaited from inside a worker, since it waits for screens to be
    dismissed.
    """

    def __init__(self, app: AppProtocol) -> None:
        self.app = app

    async def enter_credentials(self, server: ConnectionConfig) -> ConnectionConfig:
        message = None if not server.has_credentials else "The server rejected the stored credentials."
        result = await self.app.push_screen_wait(CredentialsScreen(server, message))
        if result is None:
            raise RemediationCancelled("Credential entry cancelled.")
        username, password, save_password = result
        return self.app.connection_service.update_credentials(
            server, username, password, save_password=save_password
        )

    async def configure_firewall(self, server: ConnectionConfig) -> None:
        firewall = self.app.services.create_firewall_configurator()
        if firewall.is_configured:
            prompt = f'Server "{server.name}" rejected this client. Run the configured firewall command?'
            if not await self.app.push_screen_wait(ConfirmScreen(prompt, confirm_label="Run")):
                raise RemediationCancelled("Firewall configuration cancelled.")
            await asyncio.to_thread(firewall.configure, server)
            self.app.notify(f"Firewall configured for {server.name}")
            return
        prompt = (
            f'Server "{server.name}" rejected this client\'s address. '
            "Allow it in the server's firewall, then retry."
        )
        if not await self.app.push_screen_wait(ConfirmScreen(prompt, confirm_label="Retry")):
            raise RemediationCancelled("Firewall configuration cancelled.")
