"""Factory for creating credential stores."""

from typing import Any

from .base import CredentialStore


def create_credential_store(
    backend: str = "env",
    **kwargs: Any
) -> CredentialStore:
    """Create a credential store.

    Args:
        backend: Backend type ("env", "file" or "memory")
        **kwargs: Backend-specific configuration
            For env: variable (default: OPENAI_API_KEY)
            For file: path (default: ~/.config/streamchat/settings.json)
            For memory: api_key

    Returns:
        CredentialStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "env":
        from .env import EnvCredentialStore
        return EnvCredentialStore(**kwargs)

    elif backend == "file":
        from .file import FileCredentialStore
        return FileCredentialStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryCredentialStore
        return InMemoryCredentialStore(**kwargs)

    raise ValueError(
        f"Unsupported credential backend: {backend}. "
        f"Supported backends: env, file, memory"
    )
