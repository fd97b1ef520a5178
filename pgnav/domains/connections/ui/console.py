"""Terminal prompts for the connection remediation loop (CLI)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from pgnav.domains.connections.domain.config import ConnectionConfig
from pgnav.shared.core.errors import FirewallConfigurationError, RemediationCancelled

if TYPE_CHECKING:
    from pgnav.domains.connections.app.firewall import FirewallConfigurator
    from pgnav.domains.connections.app.service import ConnectionService


class ConsoleRemediation:
    """Prompts on the terminal; Ctrl+C or a "no" answer aborts the loop."""

    def __init__(
        self,
        service: ConnectionService,
        firewall: FirewallConfigurator,
        console: Console,
        *,
        save_password: bool = False,
    ) -> None:
        self.service = service
        self.firewall = firewall
        self.console = console
        self.save_password = save_password

    async def enter_credentials(self, server: ConnectionConfig) -> ConnectionConfig:
        self.console.print(f"[yellow]Credentials required for server[/] [bold]{escape(server.name)}[/] ({escape(server.display_host)})")
        try:
            username = Prompt.ask("Username", default=server.username or None, console=self.console)
            password = Prompt.ask("Password", password=True, console=self.console)
        except (KeyboardInterrupt, EOFError):
            raise RemediationCancelled("Credential entry cancelled.") from None
        if not username or not password:
            raise RemediationCancelled("Credential entry cancelled.")
        return self.service.update_credentials(server, username, password, save_password=self.save_password)

    async def configure_firewall(self, server: ConnectionConfig) -> None:
        self.console.print(f"[yellow]Server[/] [bold]{escape(server.name)}[/] [yellow]rejected this client's address.[/]")
        try:
            if self.firewall.is_configured:
                if not Confirm.ask("Run the configured firewall command?", default=True, console=self.console):
                    raise RemediationCancelled("Firewall configuration cancelled.")
                try:
                    self.firewall.configure(server)
                except FirewallConfigurationError as exc:
                    self.console.print(f"[red]{escape(str(exc))}[/]")
                    if not Confirm.ask("Retry the connection anyway?", default=False, console=self.console):
                        raise RemediationCancelled("Firewall configuration cancelled.") from exc
                return
            if not Confirm.ask(
                "Allow this client in the server's firewall, then retry?",
                default=True,
                console=self.console,
            ):
                raise RemediationCancelled("Firewall configuration cancelled.")
        except (KeyboardInterrupt, EOFError):
            raise RemediationCancelled("Firewall configuration cancelled.") from None
