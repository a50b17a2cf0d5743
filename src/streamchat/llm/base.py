from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from .models import ChatMessage, StreamingResponse


class CompletionClient(ABC):
    """Abstract base class for completion backends.

    This module hides the design decision of where completions come from.
    Implementations handle:
    - Client setup and transport
    - Request format conversion
    - Decoding the streamed reply into text
    - Mapping backend failures onto streamchat.errors

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            stream = await client.stream_completion(messages, api_key)
        # Automatically cleaned up
    """

    @abstractmethod
    async def stream_completion(
        self,
        messages: Sequence[ChatMessage],
        api_key: str,
        **kwargs: Any
    ) -> StreamingResponse:
        """Request a completion for the conversation and stream the reply.

        Args:
            messages: Full ordered conversation history
            api_key: Credential sent along with the request
            **kwargs: Backend-specific parameters

        Returns:
            StreamingResponse yielding decoded text fragments

        Raises:
            CompletionError: Raised while iterating when the stream fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "CompletionClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
