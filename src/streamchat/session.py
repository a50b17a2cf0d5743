"""Chat session controller.

Owns the mutable state of one conversation (store, persona, busy gate)
and runs a chat turn: persona seeding, the completion request and the
fold of streamed fragments into a single pending assistant message.
"""

import asyncio
from functools import partial
from typing import Any

from .conversation import (
    DEFAULT_PERSONA,
    ConversationStore,
    Message,
    Persona,
    Role,
    Snapshot,
    create_message,
    render_system_message,
)
from .errors import CompletionError, CredentialError, PersonaLockedError, SessionBusyError
from .llm import ChatMessage, CompletionClient
from .settings import CredentialStore


def merge_pending(pending: Message, messages: Snapshot) -> Snapshot:
    """Put ``pending`` into ``messages``.

    Replaces the entry with the same id in place, or appends it when the
    snapshot does not contain it yet.
    """
    if any(m.id == pending.id for m in messages):
        return tuple(pending if m.id == pending.id else m for m in messages)
    return (*messages, pending)


class ChatSession:
    """Controller for a single conversation.

    At most one completion is in flight per session. ``send_message``
    raises :class:`SessionBusyError` while a reply is streaming, and the
    gate is released on every way a turn can end.

    A pending reply reacts to outside changes as follows: an edit of the
    pending message is overwritten by the next fragment; deleting it (or
    clearing the conversation) stops the stream without adding it back.
    Before the first fragment lands, removing the user message the reply
    answers (including through a clear) stops the stream the same way.

    Example:
        session = ChatSession(client, credentials, persona=Persona.DEVELOPER)
        session.store.subscribe(render)
        reply = await session.send_message("Hello")
    """

    def __init__(
        self,
        client: CompletionClient,
        credentials: CredentialStore,
        persona: Persona | str = DEFAULT_PERSONA,
        store: ConversationStore | None = None,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._store = store if store is not None else ConversationStore()
        self._persona = Persona(persona)
        self._busy = False
        self._turn_task: asyncio.Task | None = None
        self._last_usage: dict[str, Any] | None = None
        self._debug_callback: Any | None = None

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def messages(self) -> Snapshot:
        return self._store.messages

    @property
    def client(self) -> CompletionClient:
        return self._client

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def persona(self) -> Persona:
        """Persona used to seed the system message of the next conversation."""
        return self._persona

    @persona.setter
    def persona(self, persona: Persona | str) -> None:
        persona = Persona(persona)
        if persona != self._persona and not self._store.is_empty:
            raise PersonaLockedError()
        self._persona = persona

    @property
    def busy(self) -> bool:
        """True while a reply is streaming."""
        return self._busy

    @property
    def last_usage(self) -> dict[str, Any] | None:
        """Token usage of the last completed turn, when the backend reports it."""
        return self._last_usage

    def needs_credentials(self) -> bool:
        """True if the stored API key is missing or invalid."""
        return not self._credentials.has_valid_key()

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for execution logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Session", message)

    def delete_message(self, message_id: str) -> Snapshot:
        return self._store.delete_by_id(message_id)

    def edit_message(self, message_id: str, new_text: str) -> Snapshot:
        return self._store.edit_text(message_id, new_text)

    def clear(self) -> Snapshot:
        return self._store.clear()

    def cancel(self) -> bool:
        """Cancel the in-flight turn.

        Returns:
            True if a turn was running and has been asked to stop
        """
        if self._turn_task is None or self._turn_task.done():
            return False
        self._debug("info", "Cancelling in-flight reply")
        self._turn_task.cancel()
        return True

    async def send_message(self, text: str) -> Message | None:
        """Run one chat turn for ``text``.

        Args:
            text: What the user typed

        Returns:
            The assistant message as last published, or None when the input
            was blank, no text arrived, or the reply was removed mid-stream

        Raises:
            SessionBusyError: A reply is still streaming
            CredentialError: No valid API key; nothing was sent
            CompletionError: The stream failed; partial text stays in the store
        """
        if not text or not text.strip():
            return None
        if self._busy:
            self._debug("warning", "Send refused: a reply is still streaming")
            raise SessionBusyError()

        api_key = self._credentials.load()
        if not self._credentials.is_valid(api_key):
            self._debug("warning", "Send refused: API key missing or invalid")
            raise CredentialError()

        self._busy = True
        self._turn_task = asyncio.current_task()
        try:
            if self._store.is_empty:
                self._store.append(
                    create_message(Role.SYSTEM, render_system_message(self._persona))
                )
                self._debug("debug", f"Seeded system message ({self._persona.value})")
            prompt = create_message(Role.USER, text)
            self._store.append(prompt)

            history = [ChatMessage(**m.to_wire()) for m in self._store.messages]
            self._debug("info", f"Requesting completion for {len(history)} message(s)")
            return await self._stream_reply(history, api_key, prompt.id)
        except CompletionError as e:
            self._debug("error", f"Stream failed: {e}")
            raise
        except asyncio.CancelledError:
            self._debug("warning", "Reply cancelled")
            raise
        finally:
            self._busy = False
            self._turn_task = None

    async def _stream_reply(
        self,
        history: list[ChatMessage],
        api_key: str,
        prompt_id: str,
    ) -> Message | None:
        """Fold the streamed fragments into one pending assistant message.

        Before the first publish the reply is anchored to the user message
        it answers (``prompt_id``); afterwards to the pending message itself.
        Once the anchor is gone the stream stops, so a reply never lands in
        a conversation that was cleared underneath it.
        """
        pending = create_message(Role.ASSISTANT, "")
        published = False
        accumulated = ""
        chunks = 0

        stream = await self._client.stream_completion(history, api_key)
        async with stream:
            async for fragment in stream:
                anchor = pending.id if published else prompt_id
                if self._store.get(anchor) is None:
                    self._debug("info", "Reply target was removed, stopping stream")
                    return None
                accumulated += fragment
                chunks += 1
                self._store.update(partial(merge_pending, pending.with_text(accumulated)))
                published = True

        self._last_usage = stream.usage
        self._debug("info", f"Reply complete: {chunks} chunk(s), {len(accumulated)} char(s)")
        return self._store.get(pending.id)
