"""Credential settings module for streamchat.

Provides the API key source the chat session reads before every send.
"""

from .base import CredentialStore, is_valid_api_key
from .factory import create_credential_store

__all__ = [
    "CredentialStore",
    "create_credential_store",
    "is_valid_api_key",
]
