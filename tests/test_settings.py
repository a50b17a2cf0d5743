"""Unit tests for the credential stores."""
import json
import stat

import pytest

from conftest import VALID_API_KEY
from streamchat.settings import create_credential_store, is_valid_api_key
from streamchat.settings.env import EnvCredentialStore
from streamchat.settings.file import FileCredentialStore
from streamchat.settings.in_memory import InMemoryCredentialStore


class TestKeyValidation:
    """Tests for is_valid_api_key."""

    @pytest.mark.parametrize(
        "api_key",
        [None, "", "sk-", "sk-short", "pk-" + "a" * 48, "sk-" + "a" * 37],
    )
    def test_rejects(self, api_key):
        assert not is_valid_api_key(api_key)

    @pytest.mark.parametrize("api_key", [VALID_API_KEY, "sk-" + "a" * 38])
    def test_accepts(self, api_key):
        assert is_valid_api_key(api_key)


class TestInMemoryCredentialStore:
    def test_save_then_load(self):
        store = InMemoryCredentialStore()
        assert store.load() is None
        assert not store.has_valid_key()

        store.save(VALID_API_KEY)

        assert store.load() == VALID_API_KEY
        assert store.has_valid_key()
        assert store.backend_type == "memory"


class TestEnvCredentialStore:
    def test_reads_variable(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", VALID_API_KEY)
        assert EnvCredentialStore().load() == VALID_API_KEY

    def test_missing_variable(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        store = EnvCredentialStore()
        assert store.load() is None
        assert not store.has_valid_key()

    def test_save_updates_process_environment(self, monkeypatch):
        monkeypatch.delenv("STREAMCHAT_TEST_KEY", raising=False)
        store = EnvCredentialStore(variable="STREAMCHAT_TEST_KEY")

        store.save(VALID_API_KEY)

        assert store.load() == VALID_API_KEY
        monkeypatch.delenv("STREAMCHAT_TEST_KEY")


class TestFileCredentialStore:
    def test_missing_file(self, tmp_path):
        assert FileCredentialStore(tmp_path / "settings.json").load() is None

    def test_save_writes_private_json(self, tmp_path):
        """Test the file layout and permissions."""
        path = tmp_path / "nested" / "settings.json"
        store = FileCredentialStore(path)

        store.save(VALID_API_KEY)

        assert json.loads(path.read_text()) == {"apiKey": VALID_API_KEY}
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert FileCredentialStore(path).load() == VALID_API_KEY

    @pytest.mark.parametrize("content", ["not json", "[]", '{"apiKey": 3}', '{"apiKey": ""}'])
    def test_unusable_file_means_no_key(self, tmp_path, content):
        path = tmp_path / "settings.json"
        path.write_text(content)
        assert FileCredentialStore(path).load() is None


class TestFactory:
    def test_backends(self, tmp_path):
        assert create_credential_store().backend_type == "env"
        assert create_credential_store("memory", api_key="x").load() == "x"
        assert create_credential_store("file", path=tmp_path / "s.json").backend_type == "file"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported credential backend"):
            create_credential_store("keychain")
