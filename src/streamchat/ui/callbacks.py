"""Debug callback integration.

Hides how trace messages from the session reach the TUI log panel.
"""

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import DebugPanel


class DebugCallback:
    """Routes ``(level, component, message)`` trace calls to a DebugPanel.

    Uses call_from_thread when invoked off the app thread.
    """

    def __init__(self, panel: "DebugPanel", app: "App | None" = None) -> None:
        self.panel = panel
        self.app = app

    def __call__(self, level: str, component: str, message: str) -> None:
        writer = {
            "debug": self.panel.debug,
            "info": self.panel.info,
            "warning": self.panel.warning,
            "error": self.panel.error,
        }.get(level, self.panel.debug)

        if self.app is not None and self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(writer, component, message)
        else:
            writer(component, message)
