"""Abstract base class for credential stores.

The abstraction hides where the API key lives (process memory,
environment, a settings file) and how it is written back.
"""

from abc import ABC, abstractmethod

API_KEY_PREFIX = "sk-"
API_KEY_MIN_LENGTH = 41


def is_valid_api_key(api_key: str | None) -> bool:
    """Check that ``api_key`` looks like an OpenAI secret key."""
    return bool(api_key) and api_key.startswith(API_KEY_PREFIX) and len(api_key) >= API_KEY_MIN_LENGTH


class CredentialStore(ABC):
    """Source of the API key sent with each completion request."""

    @abstractmethod
    def load(self) -> str | None:
        """Return the stored API key, or None if there is none."""

    @abstractmethod
    def save(self, api_key: str) -> None:
        """Store ``api_key``, replacing any previous one."""

    def is_valid(self, api_key: str | None) -> bool:
        """Validity predicate applied to loaded keys."""
        return is_valid_api_key(api_key)

    def has_valid_key(self) -> bool:
        return self.is_valid(self.load())

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
