from collections.abc import AsyncIterator, Sequence
from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import CompletionConnectionError, CompletionHTTPError
from ..base import CompletionClient
from ..models import ChatMessage, StreamingResponse


class OpenAICompletionClient(CompletionClient):
    """Completion backend calling the OpenAI Chat Completions API directly.

    Hidden design decisions:
    - OpenAI API client initialization (one client per API key)
    - Message format conversion (text -> content)
    - Mapping SDK errors onto streamchat.errors
    """

    def __init__(
        self,
        model: str = "gpt-4",
        base_url: str | None = None,
        organization: str | None = None,
        temperature: float = 0.5,
        max_tokens: int | None = None,
        **client_kwargs: Any
    ):
        """Initialize the OpenAI backend.

        Args:
            model: Chat model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._base_url = base_url
        self._organization = organization
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client_kwargs = client_kwargs
        self._client: AsyncOpenAI | None = None
        self._client_key: str | None = None
        self._current_stream_response: StreamingResponse | None = None

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def _client_for(self, api_key: str) -> AsyncOpenAI:
        """Return a client bound to ``api_key``, replacing a stale one."""
        if self._client is not None and self._client_key == api_key:
            return self._client
        if self._client is not None:
            await self._client.close()
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=self._base_url,
            organization=self._organization,
            **self._client_kwargs
        )
        self._client_key = api_key
        return self._client

    async def stream_completion(
        self,
        messages: Sequence[ChatMessage],
        api_key: str,
        **kwargs: Any
    ) -> StreamingResponse:
        """Stream a chat completion from OpenAI.

        Args:
            messages: Conversation history
            api_key: OpenAI API key
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            StreamingResponse that yields text chunks and captures usage info
        """
        openai_messages = [{"role": msg.role, "content": msg.text} for msg in messages]
        response = StreamingResponse(
            self._chat_stream_generator(api_key, openai_messages, **kwargs)
        )
        self._current_stream_response = response
        return response

    async def _chat_stream_generator(
        self,
        api_key: str,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Internal generator for Chat Completions streaming with usage capture."""
        request_params: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": self._temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }
        if self._max_tokens is not None:
            request_params["max_tokens"] = self._max_tokens

        try:
            client = await self._client_for(api_key)
            stream = await client.chat.completions.create(**request_params)

            async for chunk in stream:
                if chunk.usage is not None and self._current_stream_response is not None:
                    self._current_stream_response.set_usage({
                        "prompt_tokens": chunk.usage.prompt_tokens,
                        "completion_tokens": chunk.usage.completion_tokens,
                        "total_tokens": chunk.usage.total_tokens,
                    })
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except openai.APIStatusError as e:
            raise CompletionHTTPError(e.status_code, e.message) from e
        except openai.APIConnectionError as e:
            raise CompletionConnectionError(str(e)) from e

    async def close(self) -> None:
        """Close the OpenAI client if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._client_key = None
