"""Terminal UI module for streamchat.

Provides a Textual-based TUI bound to a ChatSession.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (message list, composer, persona picker, log panel)
- formatting.py: How message headers and bodies are rendered
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (settings, message editor)
- callbacks.py: How trace messages reach the log panel
- app.py: Application orchestration (user interaction flow)
"""

from .app import ChatApp, run_textual_tui
from .callbacks import DebugCallback
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MessageView, PersonaSelector

__all__ = [
    "ChatApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugCallback",
    "DebugPanel",
    "LogLevel",
    "MessageView",
    "PersonaSelector",
    "run_textual_tui",
]
