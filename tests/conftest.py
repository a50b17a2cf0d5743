"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from streamchat.llm import ChatMessage, CompletionClient, StreamingResponse
from streamchat.session import ChatSession
from streamchat.settings.in_memory import InMemoryCredentialStore

VALID_API_KEY = "sk-" + "a" * 48

END = object()


class QueueCompletionClient(CompletionClient):
    """Completion client fed by the test through a queue.

    Items are text fragments, exceptions (raised at that point of the
    stream) or END.
    """

    def __init__(self, items: Sequence[Any] = ()) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()
        self.requests: list[dict[str, Any]] = []
        self.closed = False
        self.feed(*items)

    def feed(self, *items: Any) -> None:
        for item in items:
            self.queue.put_nowait(item)

    async def stream_completion(
        self,
        messages: Sequence[ChatMessage],
        api_key: str,
        **kwargs: Any
    ) -> StreamingResponse:
        self.requests.append({"messages": list(messages), "api_key": api_key})
        return StreamingResponse(self._generate())

    async def _generate(self):
        while True:
            item = await self.queue.get()
            if item is END:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    async def close(self) -> None:
        self.closed = True


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


@pytest.fixture
def api_key():
    """Return a key that passes validation."""
    return VALID_API_KEY


@pytest.fixture
def credentials(api_key):
    """Return an in-memory credential store holding a valid key."""
    return InMemoryCredentialStore(api_key)


@pytest.fixture
def client():
    """Return an empty queue-driven completion client."""
    return QueueCompletionClient()


@pytest.fixture
def session(client, credentials):
    """Return a session wired to the queue client."""
    return ChatSession(client=client, credentials=credentials)
