"""Data models for the conversation.

Hides the representation of a chat message: its identifier scheme,
the per-role display defaults, and what gets sent over the wire.
"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class RoleDefaults(BaseModel):
    """Display label and avatar used for every message of a role."""

    model_config = ConfigDict(frozen=True)

    sender: str
    avatar: str


ROLE_DEFAULTS = MappingProxyType({
    Role.SYSTEM: RoleDefaults(sender="Bot", avatar="robot"),
    Role.USER: RoleDefaults(sender="You", avatar="face"),
    Role.ASSISTANT: RoleDefaults(sender="Bot", avatar="robot-outline"),
})


def new_message_id() -> str:
    """Return a fresh opaque message identifier."""
    return uuid4().hex


class Message(BaseModel):
    """A single entry of the conversation.

    Messages are frozen: a text change produces a copy that keeps the same
    ``id``, so the entry keeps its identity and position in the list.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_message_id, description="Opaque unique token")
    role: Role = Field(description="system, user or assistant")
    text: str = Field(default="", description="Message body")
    sender: str = Field(description="Display label of the author")
    avatar: str = Field(description="Avatar reference for the renderer")
    created_at: datetime = Field(default_factory=datetime.now)

    def with_text(self, text: str) -> "Message":
        """Return a copy of this message carrying ``text``."""
        return self.model_copy(update={"text": text})

    def to_wire(self) -> dict[str, str]:
        """Fields transmitted to the completion endpoint."""
        return {"role": self.role.value, "text": self.text}


def create_message(role: Role | str, text: str) -> Message:
    """Create a message with a fresh id and the role's display defaults."""
    role = Role(role)
    defaults = ROLE_DEFAULTS[role]
    return Message(role=role, text=text, sender=defaults.sender, avatar=defaults.avatar)
