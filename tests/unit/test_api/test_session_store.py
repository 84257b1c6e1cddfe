"""
Unit tests for session credential storage.

Covers the memory, encrypted file and keyring scopes and the two-scope
SessionStore built on them.
"""

import json
import os
import stat
from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from cargolink.api.session_store import (
    FileSessionScope,
    KeyringSessionScope,
    MemorySessionScope,
    SessionCredential,
    SessionStore,
    TOKEN_KEY,
    USER_KEY,
)
from cargolink.core.config_manager import SessionConfig
from cargolink.core.error_handler import SessionStorageError
from tests.fixtures.sample_data import SAMPLE_TOKEN, SAMPLE_USER


class TestMemorySessionScope:

    @pytest.mark.unit
    def test_set_get_remove(self):
        scope = MemorySessionScope()
        scope.set(TOKEN_KEY, SAMPLE_TOKEN)

        assert scope.get(TOKEN_KEY) == SAMPLE_TOKEN
        scope.remove(TOKEN_KEY)
        scope.remove(TOKEN_KEY)
        assert scope.get(TOKEN_KEY) is None


class TestFileSessionScope:

    @pytest.mark.unit
    def test_values_persist_across_instances(self, tmp_path):
        path = tmp_path / "store" / "session.enc"
        FileSessionScope(path, "secret").set(TOKEN_KEY, SAMPLE_TOKEN)

        assert FileSessionScope(path, "secret").get(TOKEN_KEY) == SAMPLE_TOKEN

    @pytest.mark.unit
    def test_file_is_encrypted(self, tmp_path):
        path = tmp_path / "session.enc"
        FileSessionScope(path, "secret").set(TOKEN_KEY, SAMPLE_TOKEN)

        assert SAMPLE_TOKEN.encode() not in path.read_bytes()

    @pytest.mark.unit
    @pytest.mark.skipif(os.name == 'nt', reason="POSIX permissions")
    def test_file_permissions(self, tmp_path):
        path = tmp_path / "store" / "session.enc"
        FileSessionScope(path, "secret").set(TOKEN_KEY, SAMPLE_TOKEN)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert stat.S_IMODE(path.parent.stat().st_mode) == 0o700

    @pytest.mark.unit
    def test_other_secret_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.enc"
        FileSessionScope(path, "secret").set(TOKEN_KEY, SAMPLE_TOKEN)

        assert FileSessionScope(path, "another-secret").get(TOKEN_KEY) is None

    @pytest.mark.unit
    def test_removing_last_value_deletes_file(self, tmp_path):
        path = tmp_path / "session.enc"
        scope = FileSessionScope(path, "secret")
        scope.set(TOKEN_KEY, SAMPLE_TOKEN)
        scope.remove(TOKEN_KEY)

        assert not path.exists()
        scope.remove(TOKEN_KEY)

    @pytest.mark.unit
    def test_write_failure_wrapped(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        scope = FileSessionScope(blocker / "session.enc", "secret")

        with pytest.raises(SessionStorageError):
            scope.set(TOKEN_KEY, SAMPLE_TOKEN)


class TestKeyringSessionScope:

    @pytest.mark.unit
    def test_delegates_to_keyring(self):
        scope = KeyringSessionScope("CargoLink-Test")
        with patch('cargolink.api.session_store.keyring') as mock_keyring:
            mock_keyring.get_password.return_value = SAMPLE_TOKEN

            scope.set(TOKEN_KEY, SAMPLE_TOKEN)
            assert scope.get(TOKEN_KEY) == SAMPLE_TOKEN
            scope.remove(TOKEN_KEY)

        mock_keyring.set_password.assert_called_once_with("CargoLink-Test", TOKEN_KEY, SAMPLE_TOKEN)
        mock_keyring.get_password.assert_called_once_with("CargoLink-Test", TOKEN_KEY)
        mock_keyring.delete_password.assert_called_once_with("CargoLink-Test", TOKEN_KEY)

    @pytest.mark.unit
    def test_missing_entry_delete_ignored(self):
        scope = KeyringSessionScope()
        with patch('cargolink.api.session_store.keyring') as mock_keyring:
            mock_keyring.delete_password.side_effect = PasswordDeleteError("not found")

            scope.remove(USER_KEY)

    @pytest.mark.unit
    def test_backend_failure_wrapped(self):
        scope = KeyringSessionScope()
        with patch('cargolink.api.session_store.keyring') as mock_keyring:
            mock_keyring.get_password.side_effect = KeyringError("locked")

            with pytest.raises(SessionStorageError):
                scope.get(TOKEN_KEY)

    @pytest.mark.unit
    def test_keyring_calls_serialized(self):
        scope = KeyringSessionScope()
        held = []

        def record(*args):
            held.append(scope._lock.locked())

        with patch('cargolink.api.session_store.keyring') as mock_keyring:
            mock_keyring.get_password.side_effect = record
            mock_keyring.set_password.side_effect = record
            mock_keyring.delete_password.side_effect = record

            scope.set(TOKEN_KEY, SAMPLE_TOKEN)
            scope.get(TOKEN_KEY)
            scope.remove(TOKEN_KEY)

        assert held == [True, True, True]
        assert not scope._lock.locked()


class TestSessionStore:

    @pytest.mark.unit
    def test_empty_store(self, session_store):
        assert session_store.read() is None
        assert session_store.read_token() is None
        assert not session_store.has_session()

    @pytest.mark.unit
    def test_remember_saves_to_durable_scope(self, session_store, durable_scope, ephemeral_scope):
        session_store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER), remember=True)

        assert durable_scope.get(TOKEN_KEY) == SAMPLE_TOKEN
        assert ephemeral_scope.get(TOKEN_KEY) is None
        assert session_store.read().user == SAMPLE_USER

    @pytest.mark.unit
    def test_default_saves_to_ephemeral_scope(self, session_store, durable_scope, ephemeral_scope):
        session_store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER))

        assert durable_scope.get(TOKEN_KEY) is None
        assert ephemeral_scope.get(TOKEN_KEY) == SAMPLE_TOKEN

    @pytest.mark.unit
    def test_durable_scope_wins(self, session_store, durable_scope, ephemeral_scope):
        durable_scope.set(TOKEN_KEY, "durable")
        ephemeral_scope.set(TOKEN_KEY, "ephemeral")

        assert session_store.read_token() == "durable"

    @pytest.mark.unit
    def test_clear_removes_both_scopes_and_is_idempotent(self, session_store, durable_scope, ephemeral_scope):
        for scope in (durable_scope, ephemeral_scope):
            scope.set(TOKEN_KEY, SAMPLE_TOKEN)
            scope.set(USER_KEY, json.dumps(SAMPLE_USER))

        session_store.clear()
        session_store.clear()

        for scope in (durable_scope, ephemeral_scope):
            assert scope.get(TOKEN_KEY) is None
            assert scope.get(USER_KEY) is None

    @pytest.mark.unit
    def test_update_user_rewrites_holding_scope(self, session_store, ephemeral_scope):
        session_store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER))

        assert session_store.update_user({**SAMPLE_USER, "role": "admin"}) is True
        assert json.loads(ephemeral_scope.get(USER_KEY))["role"] == "admin"

    @pytest.mark.unit
    def test_update_user_without_session(self, session_store):
        assert session_store.update_user(SAMPLE_USER) is False

    @pytest.mark.unit
    def test_malformed_user_record_ignored(self, session_store, ephemeral_scope):
        ephemeral_scope.set(TOKEN_KEY, SAMPLE_TOKEN)
        ephemeral_scope.set(USER_KEY, "{not json")

        assert session_store.read().user == {}

    @pytest.mark.unit
    def test_credential_repr_hides_token(self):
        assert SAMPLE_TOKEN not in repr(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER))

    @pytest.mark.unit
    def test_from_config_file_backend(self, tmp_path):
        store = SessionStore.from_config(SessionConfig(backend="file", storage_dir=str(tmp_path)))
        store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER), remember=True)

        assert isinstance(store.durable, FileSessionScope)
        assert (tmp_path / "session.enc").exists()

    @pytest.mark.unit
    def test_from_config_other_backends(self):
        assert isinstance(SessionStore.from_config(SessionConfig(backend="keyring")).durable, KeyringSessionScope)
        assert isinstance(SessionStore.from_config(SessionConfig(backend="memory")).durable, MemorySessionScope)
