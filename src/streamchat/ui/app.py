"""Main Textual TUI application.

Binds a ChatSession to the screen: store snapshots drive the message
list, the composer feeds the session, and the busy gate drives the Send
button.
"""

import asyncio
import contextlib

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..conversation import Snapshot
from ..errors import CompletionError, CredentialError, PersonaLockedError, SessionBusyError
from ..session import ChatSession
from .callbacks import DebugCallback
from .config import DARK_THEME, LIGHT_THEME, LogLevel
from .screens import EditMessageScreen, SettingsScreen
from .styles import APP_CSS
from .themes import THEMES
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MessageView, PersonaSelector


class ChatApp(App):
    """Textual TUI for a streaming chat session."""

    CSS = APP_CSS
    TITLE = "streamchat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+s", "show_settings", "Settings"),
        Binding("ctrl+t", "toggle_theme", "Light/Dark"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("escape", "cancel_reply", "Cancel"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(self, session: ChatSession, log_level: str | None = None) -> None:
        super().__init__()
        self._session = session
        self._log_level = log_level
        self._unsubscribe = None

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield PersonaSelector(self._session.persona, id="persona-selector")
        yield ChatHistoryWidget(id="chat-history")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        for theme in THEMES:
            self.register_theme(theme)
        self.theme = DARK_THEME

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")
        self._session.set_debug_callback(DebugCallback(log_panel, app=self))

        self._unsubscribe = self._session.store.subscribe(self._on_snapshot)
        self._on_snapshot(self._session.messages)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

        # Ask for the API key up front when there is no usable one
        if self._session.needs_credentials():
            self.action_show_settings()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        """Re-render the list for every published snapshot."""
        self.query_one("#chat-history", ChatHistoryWidget).render_snapshot(snapshot)
        self.query_one("#persona-selector", PersonaSelector).display = not snapshot
        self.sub_title = f"{self._session.persona.value} | {self._session.client.__class__.__name__}"

    def on_persona_selector_changed(self, event: PersonaSelector.Changed) -> None:
        try:
            self._session.persona = event.persona
        except PersonaLockedError as e:
            self.notify(str(e), severity="warning", timeout=3)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session.busy:
            self.notify("Wait for the current reply to finish", severity="warning", timeout=2)
            return
        self._send(event.value)

    @work(group="reply")
    async def _send(self, text: str) -> None:
        """Run one chat turn as a background async worker."""
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        log_panel = self.query_one("#debug-panel", DebugPanel)
        input_bar.set_busy(True)
        try:
            await self._session.send_message(text)
        except CredentialError as e:
            input_bar.set_text(text)
            self.notify(str(e), severity="error", timeout=4)
            self.action_show_settings()
        except SessionBusyError as e:
            input_bar.set_text(text)
            self.notify(str(e), severity="warning", timeout=2)
        except CompletionError as e:
            log_panel.error("TUI", str(e))
            self.notify(f"Error: {str(e)[:80]}", severity="error", timeout=5)
        except asyncio.CancelledError:
            self.notify("Reply cancelled", severity="warning", timeout=2)
            raise
        finally:
            input_bar.set_busy(self._session.busy)

    def on_message_view_delete_requested(self, event: MessageView.DeleteRequested) -> None:
        self._session.delete_message(event.message_id)

    def on_message_view_edit_requested(self, event: MessageView.EditRequested) -> None:
        message = self._session.store.get(event.message_id)
        if message is None:
            return

        def _apply(new_text: str | None) -> None:
            if new_text is not None:
                self._session.edit_message(event.message_id, new_text)

        self.push_screen(EditMessageScreen(message.text), _apply)

    def action_show_settings(self) -> None:
        """Open the API key dialog."""
        def _saved(api_key: str | None) -> None:
            if api_key is not None:
                self.notify("API key saved", timeout=2)

        self.push_screen(SettingsScreen(self._session.credentials), _saved)

    def action_clear_chat(self) -> None:
        """Clear the conversation. A streaming reply stops at its next chunk."""
        self._session.clear()
        self.notify("Chat cleared", timeout=2)

    def action_cancel_reply(self) -> None:
        if self._session.cancel():
            self.query_one("#debug-panel", DebugPanel).warning("TUI", "Reply cancelled by user")

    def action_toggle_theme(self) -> None:
        self.theme = LIGHT_THEME if self.theme == DARK_THEME else DARK_THEME

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        response = self.query_one("#chat-history", ChatHistoryWidget).get_last_response()
        if response is None:
            self.notify("No response to copy", severity="warning")
            return
        self.copy_to_clipboard(response)
        self.notify("Response copied")


async def run_textual_tui(session: ChatSession, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        session: Chat session to drive
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatApp(session=session, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await session.client.close()
