"""Generic modal dialogs."""

from __future__ import annotations

from collections.abc import Callable

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

DIALOG_CSS = """
#dialog {
    width: 70;
    max-width: 90%;
    height: auto;
    border: round $primary;
    background: $surface;
    padding: 1 2;
}

#dialog .dialog-title {
    text-style: bold;
    margin-bottom: 1;
}

#dialog .dialog-error {
    color: $error;
    height: auto;
}

#dialog .buttons {
    height: auto;
    margin-top: 1;
    align-horizontal: right;
}

#dialog Button {
    margin-left: 1;
}
"""


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no question. Dismisses with True only on confirm."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = (
        """
    ConfirmScreen {
        align: center middle;
    }
    """
        + DIALOG_CSS
    )

    def __init__(self, message: str, *, confirm_label: str = "Yes", cancel_label: str = "Cancel", danger: bool = False):
        super().__init__()
        self.message = message
        self.confirm_label = confirm_label
        self.cancel_label = cancel_label
        self.danger = danger

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(escape(self.message))
            with Horizontal(classes="buttons"):
                yield Button(self.confirm_label, variant="error" if self.danger else "primary", id="confirm")
                yield Button(self.cancel_label, id="cancel")

    def on_mount(self) -> None:
        self.query_one("#cancel" if self.danger else "#confirm", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm")

    def action_cancel(self) -> None:
        self.dismiss(False)


class TextPromptScreen(ModalScreen[str | None]):
    """Single-line prompt with optional validation."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = (
        """
    TextPromptScreen {
        align: center middle;
    }
    """
        + DIALOG_CSS
    )

    def __init__(
        self,
        title: str,
        *,
        value: str = "",
        placeholder: str = "",
        validator: Callable[[str], str | None] | None = None,
    ):
        super().__init__()
        self.title_text = title
        self.initial_value = value
        self.placeholder = placeholder
        self.validator = validator

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(escape(self.title_text), classes="dialog-title")
            yield Input(value=self.initial_value, placeholder=self.placeholder, id="prompt-input")
            yield Static("", id="prompt-error", classes="dialog-error")
            with Horizontal(classes="buttons"):
                yield Button("OK", variant="primary", id="ok")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def _submit(self) -> None:
        value = self.query_one("#prompt-input", Input).value.strip()
        error = self.validator(value) if self.validator else None
        if error:
            self.query_one("#prompt-error", Static).update(escape(error))
            return
        self.dismiss(value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ok":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
