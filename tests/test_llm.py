"""Unit tests for the completion clients and stream decoding."""
import json

import httpx
import pytest

from streamchat.errors import (
    CompletionConnectionError,
    CompletionHTTPError,
    StreamDecodeError,
)
from streamchat.llm import (
    ChatMessage,
    CompletionRequest,
    HttpCompletionClient,
    OpenAICompletionClient,
    StreamingResponse,
    create_completion_client,
    decode_stream,
)

HISTORY = [
    ChatMessage(role="system", text="You are helpful."),
    ChatMessage(role="user", text="Hi"),
]


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


async def _collect(stream) -> list[str]:
    return [fragment async for fragment in stream]


class TestDecodeStream:
    """Tests for incremental UTF-8 decoding."""

    @pytest.mark.asyncio
    async def test_plain_chunks_pass_through(self):
        fragments = await _collect(decode_stream(_chunks(b"Hel", b"lo")))
        assert fragments == ["Hel", "lo"]

    @pytest.mark.asyncio
    async def test_split_multibyte_character(self):
        """Test that a character split across reads is emitted once, whole."""
        encoded = "café".encode()
        fragments = await _collect(decode_stream(_chunks(encoded[:4], encoded[4:])))

        assert "".join(fragments) == "café"
        assert all("�" not in f for f in fragments)

    @pytest.mark.asyncio
    async def test_byte_by_byte_emoji(self):
        """Test a four-byte character delivered one byte at a time."""
        encoded = "a🙂b".encode()
        fragments = await _collect(decode_stream(_chunks(*(bytes([b]) for b in encoded))))

        assert fragments == ["a", "🙂", "b"]

    @pytest.mark.asyncio
    async def test_malformed_bytes_raise(self):
        with pytest.raises(StreamDecodeError):
            await _collect(decode_stream(_chunks(b"ok", b"\xff")))

    @pytest.mark.asyncio
    async def test_truncated_character_at_end_raises(self):
        """Test that a stream ending mid-character is malformed."""
        with pytest.raises(StreamDecodeError):
            await _collect(decode_stream(_chunks("é".encode()[:1])))

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        assert await _collect(decode_stream(_chunks())) == []


class TestModels:
    """Tests for the wire models."""

    def test_request_payload_uses_endpoint_names(self):
        request = CompletionRequest(api_key="sk-x", messages=HISTORY)

        assert request.to_payload() == {
            "apiKey": "sk-x",
            "messages": [
                {"role": "system", "text": "You are helpful."},
                {"role": "user", "text": "Hi"},
            ],
        }

    @pytest.mark.asyncio
    async def test_streaming_response_aclose_stops_iteration(self):
        """Test that a closed response yields nothing more and closes its source."""
        closed = []

        async def source():
            try:
                yield "a"
                yield "b"
            finally:
                closed.append(True)

        stream = StreamingResponse(source())
        assert await stream.__anext__() == "a"

        await stream.aclose()

        assert stream.closed
        assert closed == [True]
        assert await _collect(stream) == []

    @pytest.mark.asyncio
    async def test_streaming_response_usage(self):
        stream = StreamingResponse(_chunks())
        assert stream.usage is None
        stream.set_usage({"total_tokens": 3})
        assert stream.usage == {"total_tokens": 3}


def _http_client(handler) -> HttpCompletionClient:
    return HttpCompletionClient(
        base_url="http://chat.test",
        transport=httpx.MockTransport(handler),
    )


class TestHttpCompletionClient:
    """Tests for the HTTP backend against a mock transport."""

    @pytest.mark.asyncio
    async def test_posts_conversation(self):
        """Test the request path and JSON body."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"ok")

        client = _http_client(handler)
        stream = await client.stream_completion(HISTORY, "sk-test")
        async with stream:
            assert await _collect(stream) == ["ok"]
        await client.close()

        assert seen["method"] == "POST"
        assert seen["path"] == "/api/chat"
        assert seen["body"] == {
            "apiKey": "sk-test",
            "messages": [
                {"role": "system", "text": "You are helpful."},
                {"role": "user", "text": "Hi"},
            ],
        }

    @pytest.mark.asyncio
    async def test_nothing_sent_before_iteration(self):
        """Test that creating the stream does not issue the request."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, content=b"")

        client = _http_client(handler)
        stream = await client.stream_completion(HISTORY, "sk-test")
        assert calls == []

        await _collect(stream)
        assert len(calls) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_streams_chunks_across_character_boundary(self):
        """Test that body chunks are decoded incrementally."""
        body = "café".encode()

        def handler(request):
            return httpx.Response(200, content=_chunks(body[:4], body[4:]))

        client = _http_client(handler)
        fragments = await _collect(await client.stream_completion(HISTORY, "sk-test"))
        await client.close()

        assert fragments == ["caf", "é"]

    @pytest.mark.asyncio
    async def test_error_status_raises_http_error(self):
        def handler(request):
            return httpx.Response(401, content=b"bad key")

        client = _http_client(handler)
        with pytest.raises(CompletionHTTPError) as exc_info:
            await _collect(await client.stream_completion(HISTORY, "sk-test"))
        await client.close()

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "bad key"

    @pytest.mark.asyncio
    async def test_connect_failure_raises_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _http_client(handler)
        with pytest.raises(CompletionConnectionError):
            await _collect(await client.stream_completion(HISTORY, "sk-test"))
        await client.close()

    @pytest.mark.asyncio
    async def test_mid_stream_failure_keeps_earlier_fragments(self):
        """Test that fragments before a read failure were already yielded."""
        async def body():
            yield b"Hel"
            raise httpx.ReadError("connection reset")

        def handler(request):
            return httpx.Response(200, content=body())

        client = _http_client(handler)
        received = []
        with pytest.raises(CompletionConnectionError):
            async for fragment in await client.stream_completion(HISTORY, "sk-test"):
                received.append(fragment)
        await client.close()

        assert received == ["Hel"]

    @pytest.mark.asyncio
    async def test_malformed_body_raises_decode_error(self):
        def handler(request):
            return httpx.Response(200, content=b"ok\xff")

        client = _http_client(handler)
        with pytest.raises(StreamDecodeError):
            await _collect(await client.stream_completion(HISTORY, "sk-test"))
        await client.close()

    def test_endpoint(self):
        client = HttpCompletionClient(base_url="http://chat.test/", path="/v1/chat")
        assert client.endpoint == "http://chat.test/v1/chat"


def _sse_chunk(content: str | None = None, usage: dict | None = None) -> bytes:
    choices = [] if content is None else [
        {"index": 0, "delta": {"role": "assistant", "content": content}, "finish_reason": None}
    ]
    chunk = {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "gpt-4",
        "choices": choices,
        "usage": usage,
    }
    return f"data: {json.dumps(chunk)}\n\n".encode()


def _openai_client(handler) -> OpenAICompletionClient:
    return OpenAICompletionClient(
        base_url="http://openai.test/v1",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestOpenAICompletionClient:
    """Tests for the OpenAI backend against a mock transport."""

    @pytest.mark.asyncio
    async def test_streams_deltas_and_usage(self):
        """Test delta content, the text->content mapping and usage capture."""
        seen = {}
        usage = {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            body = (
                _sse_chunk("Hel")
                + _sse_chunk("lo")
                + _sse_chunk(usage=usage)
                + b"data: [DONE]\n\n"
            )
            return httpx.Response(
                200, content=body, headers={"content-type": "text/event-stream"}
            )

        client = _openai_client(handler)
        stream = await client.stream_completion(HISTORY, "sk-test")
        async with stream:
            fragments = await _collect(stream)
        await client.close()

        assert fragments == ["Hel", "lo"]
        assert stream.usage == usage
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["stream"] is True
        assert seen["body"]["model"] == "gpt-4"
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "You are helpful."},
            {"role": "user", "content": "Hi"},
        ]

    @pytest.mark.asyncio
    async def test_error_status_raises_http_error(self):
        def handler(request):
            return httpx.Response(
                401,
                json={"error": {"message": "Incorrect API key", "type": "invalid_request_error"}},
            )

        client = _openai_client(handler)
        with pytest.raises(CompletionHTTPError) as exc_info:
            await _collect(await client.stream_completion(HISTORY, "sk-test"))
        await client.close()

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_failure_raises_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _openai_client(handler)
        with pytest.raises(CompletionConnectionError):
            await _collect(await client.stream_completion(HISTORY, "sk-test"))
        await client.close()


class TestFactory:
    """Tests for create_completion_client."""

    def test_http_backend(self):
        client = create_completion_client("http", base_url="http://chat.test")
        assert isinstance(client, HttpCompletionClient)

    def test_backend_name_is_case_insensitive(self):
        assert isinstance(create_completion_client("HTTP"), HttpCompletionClient)

    def test_openai_backend(self):
        client = create_completion_client("openai", model="gpt-4o-mini")
        assert isinstance(client, OpenAICompletionClient)
        assert client.model == "gpt-4o-mini"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported backend"):
            create_completion_client("carrier-pigeon")
