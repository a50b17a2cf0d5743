"""Conversation store.

Hides how the ordered message list is held and how observers learn about
changes. Every mutation notifies observers, even when the content did not
change (a no-op edit or delete). Snapshots are plain tuples compared by
content; the empty snapshot is always the shared ``()``.
"""

from collections.abc import Callable, Iterable, Iterator

from .models import Message

Snapshot = tuple[Message, ...]
Observer = Callable[[Snapshot], None]


class ConversationStore:
    """Ordered, observable sequence of messages.

    All operations go through :meth:`update`, which applies a pure function
    to whatever the current snapshot is at call time. Callers that suspend
    between mutations (the streaming loop) therefore never overwrite edits
    made to other messages in the meantime.
    """

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: Snapshot = tuple(messages)
        self._observers: list[Observer] = []

    @property
    def messages(self) -> Snapshot:
        """The current snapshot."""
        return self._messages

    @property
    def is_empty(self) -> bool:
        return not self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def get(self, message_id: str) -> Message | None:
        """Return the message with ``message_id``, or None."""
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer`` for every published snapshot.

        Returns:
            A callable that removes the observer again
        """
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def update(self, fn: Callable[[Snapshot], Iterable[Message]]) -> Snapshot:
        """Replace the snapshot with ``fn(current)`` and publish it."""
        self._messages = tuple(fn(self._messages))
        for observer in list(self._observers):
            observer(self._messages)
        return self._messages

    def append(self, message: Message) -> Snapshot:
        return self.update(lambda messages: (*messages, message))

    def delete_by_id(self, message_id: str) -> Snapshot:
        """Remove the message with ``message_id``. Unknown ids are a no-op."""
        return self.update(
            lambda messages: (m for m in messages if m.id != message_id)
        )

    def edit_text(self, message_id: str, new_text: str) -> Snapshot:
        """Change the text of a message in place. Unknown ids are a no-op."""
        return self.update(
            lambda messages: (
                m.with_text(new_text) if m.id == message_id else m for m in messages
            )
        )

    def clear(self) -> Snapshot:
        return self.update(lambda messages: ())
