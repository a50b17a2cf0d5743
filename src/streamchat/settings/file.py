"""JSON-file credential store.

Keeps the key in a small settings file under the user's config directory,
the way a browser app would keep it in local storage.
"""

import json
from pathlib import Path

from .base import CredentialStore

DEFAULT_PATH = Path.home() / ".config" / "streamchat" / "settings.json"


class FileCredentialStore(CredentialStore):
    """Credential store backed by a JSON settings file.

    The file holds a single object: ``{"apiKey": "..."}``.
    """

    def __init__(self, path: str | Path = DEFAULT_PATH):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        """Read the key. A missing or unreadable file means no key."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        api_key = data.get("apiKey")
        return api_key if isinstance(api_key, str) and api_key else None

    def save(self, api_key: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"apiKey": api_key}), encoding="utf-8")
        self._path.chmod(0o600)

    @property
    def backend_type(self) -> str:
        return "file"
