"""Server registration and credential dialogs."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Label, Select, Static

from pgnav.domains.connections.domain.config import (
    DEFAULT_DATABASE,
    DEFAULT_PORT,
    DEFAULT_SSLMODE,
    SSL_MODES,
    ConnectionConfig,
)
from pgnav.shared.ui.dialogs import DIALOG_CSS


def validate_server_form(name: str, host: str, port: str, existing: set[str]) -> str | None:
    if not name:
        return "Name is required."
    if "/" in name:
        return 'Name cannot contain "/".'
    if name in existing:
        return f'A server named "{name}" already exists.'
    if not host:
        return "Host is required."
    if not port.isdigit() or not 0 < int(port) < 65536:
        return "Port must be a number between 1 and 65535."
    return None


class ServerFormScreen(ModalScreen[tuple[ConnectionConfig, bool] | None]):
    """Registers a new server. Dismisses with the config and the save-password flag."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = (
        """
    ServerFormScreen {
        align: center middle;
    }

    ServerFormScreen #dialog {
        max-height: 90%;
    }
    """
        + DIALOG_CSS
    )

    def __init__(self, existing_names: set[str], default_sslmode: str = DEFAULT_SSLMODE):
        super().__init__()
        self.existing_names = existing_names
        self.default_sslmode = default_sslmode if default_sslmode in SSL_MODES else DEFAULT_SSLMODE

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="dialog"):
            yield Label("Add PostgreSQL server", classes="dialog-title")
            yield Label("Name")
            yield Input(id="server-name")
            yield Label("Host")
            yield Input(value="localhost", id="server-host")
            yield Label("Port")
            yield Input(value=DEFAULT_PORT, id="server-port")
            yield Label("Username")
            yield Input(id="server-user")
            yield Label("Password")
            yield Input(password=True, id="server-password")
            yield Label("SSL mode")
            yield Select([(mode, mode) for mode in SSL_MODES], value=self.default_sslmode, allow_blank=False, id="server-sslmode")
            yield Label("Maintenance database")
            yield Input(value=DEFAULT_DATABASE, id="server-database")
            yield Checkbox("Save password", id="server-save-password")
            yield Static("", id="server-error", classes="dialog-error")
            with Horizontal(classes="buttons"):
                yield Button("Add", variant="primary", id="ok")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#server-name", Input).focus()

    def _value(self, widget_id: str) -> str:
        return self.query_one(f"#{widget_id}", Input).value.strip()

    def _submit(self) -> None:
        name = self._value("server-name")
        host = self._value("server-host")
        port = self._value("server-port")
        error = validate_server_form(name, host, port, self.existing_names)
        if error:
            self.query_one("#server-error", Static).update(escape(error))
            return
        config = ConnectionConfig(
            name=name,
            host=host,
            port=port,
            username=self._value("server-user"),
            password=self.query_one("#server-password", Input).value,
            sslmode=str(self.query_one("#server-sslmode", Select).value),
            database=self._value("server-database") or DEFAULT_DATABASE,
        )
        self.dismiss((config, self.query_one("#server-save-password", Checkbox).value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class CredentialsScreen(ModalScreen[tuple[str, str, bool] | None]):
    """Prompts for a server's username and password."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = (
        """
    CredentialsScreen {
        align: center middle;
    }
    """
        + DIALOG_CSS
    )

    def __init__(self, server: ConnectionConfig, message: str | None = None):
        super().__init__()
        self.server = server
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(
                f"Credentials for {escape(self.server.name)} ({escape(self.server.display_host)})",
                classes="dialog-title",
            )
            if self.message:
                yield Static(escape(self.message), classes="dialog-error")
            yield Label("Username")
            yield Input(value=self.server.username, id="credentials-user")
            yield Label("Password")
            yield Input(password=True, id="credentials-password")
            yield Checkbox("Save password", id="credentials-save-password")
            yield Static("", id="credentials-error", classes="dialog-error")
            with Horizontal(classes="buttons"):
                yield Button("OK", variant="primary", id="ok")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        target = "#credentials-password" if self.server.username else "#credentials-user"
        self.query_one(target, Input).focus()

    def _submit(self) -> None:
        username = self.query_one("#credentials-user", Input).value.strip()
        password = self.query_one("#credentials-password", Input).value
        if not username or not password:
            self.query_one("#credentials-error", Static).update("Username and password are required.")
            return
        save_password = self.query_one("#credentials-save-password", Checkbox).value
        self.dismiss((username, password, save_password))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
