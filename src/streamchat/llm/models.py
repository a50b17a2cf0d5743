from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for a streamed completion.

    Acts as an async iterator of decoded text fragments. The sequence is
    lazy, finite and cannot be restarted. Usage info, when the backend
    reports it, becomes available once iteration completes.

    Usage:
        async with await client.stream_completion(messages, api_key) as stream:
            async for fragment in stream:
                print(fragment, end="")
        print(stream.usage)
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
        """
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None
        self._closed = False

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by the client at end of stream)."""
        self._usage = usage

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Stop the stream and release the underlying connection."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        return await self._iter.__anext__()

    async def __aenter__(self) -> "StreamingResponse":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()


class ChatMessage(BaseModel):
    """A message as transmitted to the completion endpoint."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    text: str = Field(description="Content of the message")


class CompletionRequest(BaseModel):
    """JSON body of a completion request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(alias="apiKey", description="Credential forwarded to the endpoint")
    messages: list[ChatMessage] = Field(description="Full ordered conversation history")

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the endpoint's field names."""
        return self.model_dump(by_alias=True)
