"""Incremental decoding of a raw byte stream into text.

A single stateful decoder is used for the whole stream, so a multi-byte
character split across two reads is emitted once both halves arrived.
"""

import codecs
from collections.abc import AsyncIterable, AsyncIterator

from ..errors import StreamDecodeError


async def decode_stream(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Decode ``chunks`` into text fragments.

    Chunks that only carry the start of a character produce no fragment.

    Raises:
        StreamDecodeError: On malformed input, including a character left
            incomplete when the stream ends
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
    async for chunk in chunks:
        try:
            text = decoder.decode(chunk)
        except UnicodeDecodeError as e:
            raise StreamDecodeError(str(e)) from e
        if text:
            yield text

    try:
        tail = decoder.decode(b"", final=True)
    except UnicodeDecodeError as e:
        raise StreamDecodeError(str(e)) from e
    if tail:
        yield tail
