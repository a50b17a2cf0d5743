from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx

from ...errors import CompletionConnectionError, CompletionHTTPError
from ..base import CompletionClient
from ..decoding import decode_stream
from ..models import ChatMessage, CompletionRequest, StreamingResponse

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_PATH = "/api/chat"
DEFAULT_TIMEOUT = 60.0


class HttpCompletionClient(CompletionClient):
    """Completion backend speaking to a chat endpoint over plain HTTP.

    Hidden design decisions:
    - Request body layout ({"apiKey", "messages": [{"role", "text"}]})
    - The reply is raw text chunks, neither line-delimited nor JSON framed
    - Stateful UTF-8 decoding across chunk boundaries
    - Mapping of httpx failures onto streamchat.errors
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        path: str = DEFAULT_PATH,
        timeout: float | None = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        **client_kwargs: Any
    ):
        """Initialize the HTTP client.

        Args:
            base_url: Scheme and host of the chat endpoint
            path: Endpoint path the conversation is POSTed to
            timeout: Per-operation timeout in seconds (None disables it)
            headers: Extra headers sent with every request
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._base_url = base_url
        self._path = path
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            **client_kwargs
        )

    @property
    def endpoint(self) -> str:
        """Full URL requests are sent to."""
        return f"{self._base_url.rstrip('/')}{self._path}"

    async def stream_completion(
        self,
        messages: Sequence[ChatMessage],
        api_key: str,
        **kwargs: Any
    ) -> StreamingResponse:
        """POST the conversation and stream the reply text.

        The request is only sent once iteration starts.

        Args:
            messages: Conversation history
            api_key: Credential forwarded in the request body
            **kwargs: Extra httpx request options (e.g. headers)

        Returns:
            StreamingResponse yielding decoded text fragments
        """
        request = CompletionRequest(api_key=api_key, messages=list(messages))
        return StreamingResponse(self._stream_generator(request, **kwargs))

    async def _stream_generator(
        self,
        request: CompletionRequest,
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Internal generator reading the response body chunk by chunk."""
        try:
            async with self._client.stream(
                "POST", self._path, json=request.to_payload(), **kwargs
            ) as response:
                if not response.is_success:
                    body = await response.aread()
                    raise CompletionHTTPError(
                        response.status_code,
                        body.decode("utf-8", errors="replace"),
                    )
                async for text in decode_stream(response.aiter_bytes()):
                    yield text
        except httpx.HTTPError as e:
            raise CompletionConnectionError(str(e) or type(e).__name__) from e

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
