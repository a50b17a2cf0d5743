"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- Dark/light mode configuration

Both themes are registered on mount; ctrl+t switches between them.
"""

from textual.theme import Theme

from .config import DARK_THEME, LIGHT_THEME

# Catppuccin Mocha (dark)
CATPPUCCIN_MOCHA = Theme(
    name=DARK_THEME,
    primary="#89b4fa",      # Blue
    secondary="#cba6f7",    # Mauve
    accent="#f9e2af",       # Yellow
    foreground="#cdd6f4",
    background="#11111b",   # Crust
    success="#a6e3a1",
    warning="#fab387",      # Peach
    error="#f38ba8",
    surface="#1e1e2e",      # Base
    panel="#181825",        # Mantle
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#89b4fa 30%",
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "footer-key-foreground": "#f9e2af",
        "text-muted": "#6c7086",
        "text-disabled": "#45475a",
    },
)

# Catppuccin Latte (light)
CATPPUCCIN_LATTE = Theme(
    name=LIGHT_THEME,
    primary="#1e66f5",      # Blue
    secondary="#8839ef",    # Mauve
    accent="#df8e1d",       # Yellow
    foreground="#4c4f69",
    background="#dce0e8",   # Crust
    success="#40a02b",
    warning="#fe640b",      # Peach
    error="#d20f39",
    surface="#eff1f5",      # Base
    panel="#e6e9ef",        # Mantle
    dark=False,
    variables={
        "block-cursor-foreground": "#eff1f5",
        "block-cursor-background": "#dc8a78",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#4c4f69",
        "input-cursor-foreground": "#eff1f5",
        "input-selection-background": "#1e66f5 30%",
        "border": "#acb0be",
        "border-blurred": "#bcc0cc",
        "scrollbar": "#bcc0cc",
        "scrollbar-hover": "#acb0be",
        "scrollbar-active": "#1e66f5",
        "scrollbar-background": "#e6e9ef",
        "footer-key-foreground": "#df8e1d",
        "text-muted": "#8c8fa1",
        "text-disabled": "#acb0be",
    },
)

THEMES = (CATPPUCCIN_MOCHA, CATPPUCCIN_LATTE)
