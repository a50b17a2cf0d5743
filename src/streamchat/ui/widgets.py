"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message rendering and in-place updates while a reply streams
- Keeping the list in step with store snapshots and scrolled to the end
- Composer input history and the send gate
- Persona selection
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, RichLog, Select, Static, TextArea

from ..conversation import DEFAULT_PERSONA, PERSONAS, Message, Persona, Role, Snapshot
from .config import INPUT_HISTORY_MAX_SIZE, LOG_MAX_MESSAGE_LENGTH, LOG_TIMESTAMP_FORMAT, LogLevel
from .formatting import format_header, render_body


class MessageView(Vertical):
    """One chat message with edit and delete controls."""

    class EditRequested(TextualMessage):
        """User asked to edit a message."""

        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    class DeleteRequested(TextualMessage):
        """User asked to delete a message."""

        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    def __init__(self, message: Message, **kwargs) -> None:
        super().__init__(
            id=f"msg-{message.id}",
            classes=f"chat-message {message.role.value}-message",
            **kwargs
        )
        self._message = message
        self._header = Static(format_header(message), classes="message-header")
        self._body = Static(render_body(message), classes="message-content")

    @property
    def message(self) -> Message:
        return self._message

    def compose(self):
        with Horizontal(classes="message-bar"):
            yield self._header
            yield Button("Edit", classes="edit-btn", compact=True)
            yield Button("Del", classes="delete-btn", variant="error", compact=True)
        yield self._body

    def set_message(self, message: Message) -> None:
        """Show a newer version of the same message."""
        if message.text == self._message.text:
            self._message = message
            return
        self._message = message
        self._body.update(render_body(message))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.has_class("edit-btn"):
            self.post_message(self.EditRequested(self._message.id))
        elif event.button.has_class("delete-btn"):
            self.post_message(self.DeleteRequested(self._message.id))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat list kept in step with conversation snapshots.

    Views are keyed by message id, so a streaming reply updates one
    widget in place instead of re-mounting the whole list.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, MessageView] = {}
        self._snapshot: Snapshot = ()

    @property
    def snapshot(self) -> Snapshot:
        """Last rendered snapshot."""
        return self._snapshot

    def render_snapshot(self, snapshot: Snapshot) -> None:
        """Bring the list in line with ``snapshot`` and scroll to the end."""
        self._snapshot = snapshot
        live_ids = {m.id for m in snapshot}

        for message_id in [mid for mid in self._views if mid not in live_ids]:
            self._views.pop(message_id).remove()

        new_views = []
        for message in snapshot:
            view = self._views.get(message.id)
            if view is None:
                view = MessageView(message)
                self._views[message.id] = view
                new_views.append(view)
            else:
                view.set_message(message)
        if new_views:
            self.mount_all(new_views)

        count = sum(1 for m in snapshot if m.role != Role.SYSTEM)
        self.border_subtitle = f"{count} messages" if snapshot else "Conversation history"
        self.call_after_refresh(self.scroll_end, animate=True)

    def get_last_response(self) -> str | None:
        """Get the text of the last non-empty assistant response."""
        for message in reversed(self._snapshot):
            if message.role == Role.ASSISTANT and message.text:
                return message.text
        return None


class ChatInputBar(Horizontal):
    """Composer: TextArea, Send button and input history.

    While busy the Send button is disabled and submits are refused.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        """Enable or disable sending."""
        self._busy = busy
        self.query_one("#send-btn", Button).disabled = busy
        self.set_class(busy, "busy")

    def set_text(self, text: str) -> None:
        """Put ``text`` back into the composer."""
        self.query_one("#chat-input", TextArea).text = text

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self._busy:
            self.app.bell()
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class PersonaSelector(Vertical):
    """Persona picker shown while the conversation is empty."""

    class Changed(TextualMessage):
        """The selected persona changed."""

        def __init__(self, persona: Persona) -> None:
            super().__init__()
            self.persona = persona

    def __init__(self, persona: Persona = DEFAULT_PERSONA, **kwargs) -> None:
        super().__init__(**kwargs)
        self._persona = persona

    def compose(self):
        yield Static("AI purpose", classes="persona-title")
        yield Select(
            [(data.label, persona.value) for persona, data in PERSONAS.items()],
            value=self._persona.value,
            allow_blank=False,
            id="persona-select",
        )
        yield Static(PERSONAS[self._persona].description, id="persona-description")

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        if not isinstance(event.value, str):
            return
        self._persona = Persona(event.value)
        self.query_one("#persona-description", Static).update(
            PERSONAS[self._persona].description
        )
        self.post_message(self.Changed(self._persona))


class DebugPanel(RichLog):
    """Log panel for trace messages with level filtering.

    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        line = Text()
        line.append(datetime.now().strftime(LOG_TIMESTAMP_FORMAT), style="dim")
        line.append(" ")
        line.append(f"{LogLevel.name(level):<5}", style=self.LEVEL_COLORS.get(level, "white"))
        line.append(" ")
        line.append(f"[{component}]", style=self.COMPONENT_COLORS.get(component, "white"))
        line.append(f" {message}")
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
