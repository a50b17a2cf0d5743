"""In-memory credential store.

The key is lost when the application exits.
"""

from .base import CredentialStore


class InMemoryCredentialStore(CredentialStore):
    """Credential store holding the key in process memory.

    Suitable for single-session use or testing.
    """

    def __init__(self, api_key: str | None = None):
        self._api_key = api_key

    def load(self) -> str | None:
        return self._api_key

    def save(self, api_key: str) -> None:
        self._api_key = api_key

    @property
    def backend_type(self) -> str:
        return "memory"
