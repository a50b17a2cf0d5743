"""
streamchat: a terminal chat client that streams replies from a completion endpoint.

Each module hides one design decision: the conversation model, the
completion transport, where the API key lives, and the presentation.
"""

__version__ = "0.1.0"

from .conversation import (
    ConversationStore,
    Message,
    Persona,
    Role,
    create_message,
)
from .errors import (
    ChatError,
    CompletionError,
    CredentialError,
    PersonaLockedError,
    SessionBusyError,
)
from .llm import CompletionClient, create_completion_client
from .session import ChatSession
from .settings import CredentialStore, create_credential_store

__all__ = [
    "ChatError",
    "ChatSession",
    "CompletionClient",
    "CompletionError",
    "ConversationStore",
    "CredentialError",
    "CredentialStore",
    "Message",
    "Persona",
    "PersonaLockedError",
    "Role",
    "SessionBusyError",
    "create_completion_client",
    "create_credential_store",
    "create_message",
]
