"""Text formatting utilities for the TUI.

Hides how a message body and header are turned into Rich renderables.
"""

from rich.markdown import Markdown
from rich.text import Text

from ..conversation import Message, Role
from .config import AVATAR_GLYPHS, MESSAGE_TIMESTAMP_FORMAT, SYSTEM_MESSAGE_MAX_PREVIEW

CODE_INDICATORS = (
    "def ", "class ", "import ", "from ", "async def ",
    "if __name__", "return ", "yield ", "for ", "while ",
)


def looks_like_code(text: str) -> bool:
    """Multi-line text starting like Python source and not already fenced."""
    stripped = text.strip()
    return (
        "\n" in stripped
        and stripped.startswith(CODE_INDICATORS)
        and "```" not in stripped
    )


def format_header(message: Message) -> Text:
    """Header line: avatar glyph, sender label and time."""
    glyph = AVATAR_GLYPHS.get(message.avatar, "*")
    timestamp = message.created_at.strftime(MESSAGE_TIMESTAMP_FORMAT)
    label = message.sender
    if message.role == Role.SYSTEM:
        label = f"{label} (system)"
    header = Text(f"{glyph} ", style="bold")
    header.append(label, style="bold")
    header.append(f" {timestamp}", style="dim")
    return header


def render_body(message: Message) -> Markdown | Text:
    """Render a message body.

    Assistant replies are Markdown (bare code gets fenced), user input is
    shown verbatim and the system prompt is truncated.
    """
    if message.role == Role.ASSISTANT:
        if not message.text:
            return Text("...", style="dim")
        if looks_like_code(message.text):
            return Markdown(f"```python\n{message.text.strip()}\n```")
        return Markdown(message.text)

    if message.role == Role.SYSTEM:
        text = message.text
        if len(text) > SYSTEM_MESSAGE_MAX_PREVIEW:
            text = text[:SYSTEM_MESSAGE_MAX_PREVIEW] + "..."
        return Text(text, style="italic", overflow="fold")

    return Text(message.text, overflow="fold")
