"""Modal screens for the TUI.

This module hides the design decisions about:
- Dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs
- How the API key and message edits are collected

To change how dialogs look, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, TextArea

from ..settings import CredentialStore, is_valid_api_key

DIALOG_CSS = """
    align: center middle;
    background: $background 70%;

    .dialog {
        width: 70;
        height: auto;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    .dialog-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    .dialog-hint {
        color: $text-muted;
        margin-bottom: 1;
    }

    .dialog-error {
        color: $error;
        height: auto;
    }

    .dialog-buttons {
        width: 100%;
        height: 3;
        align: center middle;
        margin-top: 1;
    }

    .dialog-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
"""


class SettingsScreen(ModalScreen[str | None]):
    """API key entry.

    Dismisses with the saved key, or None when cancelled.
    """

    CSS = "SettingsScreen {" + DIALOG_CSS + "}"

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, credentials: CredentialStore) -> None:
        super().__init__()
        self._credentials = credentials

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Settings", classes="dialog-title")
            yield Static(
                "Enter your OpenAI API key. It is sent with every request.",
                classes="dialog-hint",
            )
            yield Input(
                value=self._credentials.load() or "",
                placeholder="sk-...",
                password=True,
                id="api-key-input",
            )
            yield Static("", id="api-key-error", classes="dialog-error")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", id="btn-save", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#api-key-input", Input).focus()

    def _save(self) -> None:
        api_key = self.query_one("#api-key-input", Input).value.strip()
        if not is_valid_api_key(api_key):
            self.query_one("#api-key-error", Static).update(
                "That does not look like an API key (expected 'sk-...')."
            )
            return
        self._credentials.save(api_key)
        self.dismiss(api_key)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "btn-save":
            self._save()
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class EditMessageScreen(ModalScreen[str | None]):
    """Editor for the text of one message.

    Dismisses with the new text, or None when cancelled.
    """

    CSS = "EditMessageScreen {" + DIALOG_CSS + """
    #edit-text {
        height: 12;
    }
    }"""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("ctrl+s", "save", "Save", show=False),
    ]

    def __init__(self, text: str) -> None:
        super().__init__()
        self._text = text

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Edit message", classes="dialog-title")
            yield TextArea(self._text, id="edit-text")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Save", id="btn-save", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#edit-text", TextArea).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "btn-save":
            self.action_save()
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def action_save(self) -> None:
        self.dismiss(self.query_one("#edit-text", TextArea).text)

    def action_cancel(self) -> None:
        self.dismiss(None)
