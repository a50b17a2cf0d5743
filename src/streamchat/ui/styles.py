"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
One column: persona picker (empty chat only), message list, log panel,
composer.
"""

APP_CSS = """
Screen {
    layout: vertical;
}

/* Persona picker, replaced by the list once the first turn starts */
#persona-selector {
    height: auto;
    align: center middle;
    padding: 1 4;
    border: round $accent 50%;

    & .persona-title {
        text-style: bold;
        color: $accent;
    }

    & #persona-select {
        width: 50%;
        min-width: 32;
    }

    & #persona-description {
        margin-top: 1;
        color: $text-muted;
    }
}

#chat-history {
    height: 1fr;
    border: round $primary 50%;
    border-title-color: $primary;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;

    &:focus-within {
        border: round $primary;
    }
}

#debug-panel {
    height: 10;
    border: round $warning 50%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

/* Composer; .busy while a reply streams */
ChatInputBar {
    height: 5;
    border: round $primary 50%;

    &.busy {
        border: round $warning;
        opacity: 80%;
    }

    & #chat-input {
        width: 1fr;
        border: none;
        background: transparent;
    }

    & #send-btn {
        width: 10;
        height: 100%;
        margin-left: 1;
    }
}

/* Messages, one MessageView per entry */
.chat-message {
    height: auto;
    margin-bottom: 1;
    padding: 0 1;
    border-left: wide $primary;

    &.user-message { border-left: wide $success; }
    &.assistant-message { border-left: wide $secondary; }
    &.system-message { border-left: wide $accent; opacity: 85%; }

    & .message-bar {
        height: 1;

        & .message-header { width: 1fr; }
        & Button { margin-left: 1; }
    }

    & .message-content {
        height: auto;
    }
}
"""
