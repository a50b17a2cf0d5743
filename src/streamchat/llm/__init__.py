from .base import CompletionClient
from .decoding import decode_stream
from .factory import create_completion_client
from .models import ChatMessage, CompletionRequest, StreamingResponse
from .providers import HttpCompletionClient, OpenAICompletionClient

__all__ = [
    "CompletionClient",
    "create_completion_client",
    "decode_stream",
    "ChatMessage",
    "CompletionRequest",
    "StreamingResponse",
    "HttpCompletionClient",
    "OpenAICompletionClient",
]
