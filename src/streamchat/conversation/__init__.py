"""Conversation module for streamchat.

Holds the message model, the persona table and the observable store.
"""

from .models import ROLE_DEFAULTS, Message, Role, create_message, new_message_id
from .personas import (
    DEFAULT_PERSONA,
    PERSONAS,
    Persona,
    PersonaData,
    render_system_message,
)
from .store import ConversationStore, Snapshot

__all__ = [
    "ConversationStore",
    "DEFAULT_PERSONA",
    "Message",
    "PERSONAS",
    "Persona",
    "PersonaData",
    "ROLE_DEFAULTS",
    "Role",
    "Snapshot",
    "create_message",
    "new_message_id",
    "render_system_message",
]
