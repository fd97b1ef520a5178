"""Function query wizard."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from pgnav.domains.query.app.templates import validate_function_name, validate_return_type
from pgnav.shared.ui.dialogs import DIALOG_CSS


class FunctionQueryScreen(ModalScreen[tuple[str, str] | None]):
    """Asks for the name and return type of a new function."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = (
        """
    FunctionQueryScreen {
        align: center middle;
    }
    """
        + DIALOG_CSS
    )

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label("New function", classes="dialog-title")
            yield Label("Name")
            yield Input(placeholder="my_function", id="function-name")
            yield Label("Return type")
            yield Input(value="void", placeholder="void", id="function-return-type")
            yield Static("", id="function-error", classes="dialog-error")
            with Horizontal(classes="buttons"):
                yield Button("Create", variant="primary", id="ok")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#function-name", Input).focus()

    def _submit(self) -> None:
        name = self.query_one("#function-name", Input).value.strip()
        return_type = self.query_one("#function-return-type", Input).value.strip()
        error = validate_function_name(name) or validate_return_type(return_type)
        if error:
            self.query_one("#function-error", Static).update(escape(error))
            return
        self.dismiss((name, return_type))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "function-name":
            self.query_one("#function-return-type", Input).focus()
            return
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
