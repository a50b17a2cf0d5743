"""Environment-variable credential store."""

import os

from .base import CredentialStore

DEFAULT_VARIABLE = "OPENAI_API_KEY"


class EnvCredentialStore(CredentialStore):
    """Reads the key from an environment variable.

    ``save`` only updates the environment of the running process.
    """

    def __init__(self, variable: str = DEFAULT_VARIABLE):
        self._variable = variable

    @property
    def variable(self) -> str:
        return self._variable

    def load(self) -> str | None:
        return os.environ.get(self._variable) or None

    def save(self, api_key: str) -> None:
        os.environ[self._variable] = api_key

    @property
    def backend_type(self) -> str:
        return "env"
