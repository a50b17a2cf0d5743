from typing import Any

from .base import CompletionClient
from .providers import HttpCompletionClient, OpenAICompletionClient


def create_completion_client(backend: str = "http", **config: Any) -> CompletionClient:
    """Create a completion client.

    This factory function hides the instantiation logic for different backends.

    Args:
        backend: Backend type ('http', 'openai')
        **config: Backend-specific configuration
            For HTTP:
                - base_url: str (default: 'http://localhost:3000')
                - path: str (default: '/api/chat')
                - timeout: float | None (default: 60.0)
                - headers: dict[str, str] | None
            For OpenAI:
                - model: str (default: 'gpt-4')
                - base_url: str | None
                - organization: str | None
                - temperature: float (default: 0.5)
                - max_tokens: int | None

    Returns:
        Initialized completion client

    Raises:
        ValueError: If backend type is not supported

    Examples:
        >>> client = create_completion_client(
        ...     "http",
        ...     base_url="http://localhost:3000"
        ... )

        >>> client = create_completion_client("openai", model="gpt-4o-mini")
    """
    backend_lower = backend.lower()

    if backend_lower == "http":
        return HttpCompletionClient(**config)

    if backend_lower == "openai":
        return OpenAICompletionClient(**config)

    raise ValueError(
        f"Unsupported backend: {backend}. "
        f"Supported backends: 'http', 'openai'"
    )
