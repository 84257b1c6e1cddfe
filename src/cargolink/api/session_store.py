"""
Session credential storage for the CargoLink client

Two persistence scopes hold the bearer token and the user record: a
durable one that survives restarts (encrypted file or system keyring) and
an ephemeral one living in process memory. The gateway client only sees
``read()`` and ``clear()``.
"""

import base64
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..core.config_manager import SessionConfig
from ..core.error_handler import SessionStorageError


TOKEN_KEY = 'token'
USER_KEY = 'user'


@dataclass(frozen=True)
class SessionCredential:
    """Bearer token plus the identity record of the logged-in user"""
    token: str
    user: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        # keep tokens out of logs and tracebacks
        return f"SessionCredential(user={self.user.get('username')!r})"


class SessionScope(ABC):
    """One persistence scope holding token and user entries"""

    name = 'scope'

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None"""
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        """Store a value"""
        pass

    @abstractmethod
    def remove(self, key: str):
        """Remove a value; removing a missing key is not an error"""
        pass


class MemorySessionScope(SessionScope):
    """Ephemeral scope, cleared when the process ends"""

    name = 'ephemeral'

    def __init__(self):
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str):
        with self._lock:
            self._values[key] = value

    def remove(self, key: str):
        with self._lock:
            self._values.pop(key, None)


class FileSessionScope(SessionScope):
    """Durable scope backed by a Fernet-encrypted JSON file"""

    name = 'durable'

    def __init__(self, path: Path, secret: str):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()
        self._cipher = Fernet(self._derive_key(secret))
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _derive_key(secret: str) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=b"cargolink-session-salt",
            iterations=100000,
        )
        return base64.urlsafe_b64encode(kdf.derive(secret.encode()))

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            decrypted = self._cipher.decrypt(self.path.read_bytes())
        except InvalidToken:
            # Written with another secret; treat as no session
            self.logger.warning(f"Ignoring unreadable session file {self.path}")
            return {}
        except OSError as e:
            raise SessionStorageError(f"Failed to read session file {self.path}: {e}") from e
        return json.loads(decrypted.decode())

    def _write_all(self, values: Dict[str, str]):
        try:
            if not values:
                self.path.unlink(missing_ok=True)
                return

            self.path.parent.mkdir(parents=True, exist_ok=True)
            if os.name != 'nt':
                os.chmod(self.path.parent, 0o700)

            self.path.write_bytes(self._cipher.encrypt(json.dumps(values).encode()))
            if os.name != 'nt':
                os.chmod(self.path, 0o600)
        except OSError as e:
            raise SessionStorageError(f"Failed to write session file {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str):
        with self._lock:
            values = self._read_all()
            values[key] = value
            self._write_all(values)

    def remove(self, key: str):
        with self._lock:
            values = self._read_all()
            if key in values:
                del values[key]
                self._write_all(values)


class KeyringSessionScope(SessionScope):
    """Durable scope backed by the operating system keyring"""

    name = 'durable'

    def __init__(self, service_name: str = "CargoLink"):
        self.service_name = service_name
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            try:
                return keyring.get_password(self.service_name, key)
            except KeyringError as e:
                raise SessionStorageError(f"Failed to read '{key}' from keyring: {e}") from e

    def set(self, key: str, value: str):
        with self._lock:
            try:
                keyring.set_password(self.service_name, key, value)
            except KeyringError as e:
                raise SessionStorageError(f"Failed to store '{key}' in keyring: {e}") from e

    def remove(self, key: str):
        with self._lock:
            try:
                keyring.delete_password(self.service_name, key)
            except PasswordDeleteError:
                pass
            except KeyringError as e:
                raise SessionStorageError(f"Failed to delete '{key}' from keyring: {e}") from e


class SessionStore:
    """
    Session credential store spanning a durable and an ephemeral scope.

    The durable scope wins when both hold a token. ``clear`` removes token
    and user from both scopes unconditionally and is safe to call any
    number of times, from any thread.
    """

    def __init__(self, durable: Optional[SessionScope] = None, ephemeral: Optional[SessionScope] = None):
        self.durable = durable or MemorySessionScope()
        self.ephemeral = ephemeral or MemorySessionScope()
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: SessionConfig) -> 'SessionStore':
        """Build a store whose durable scope follows ``session.backend``"""
        if config.backend == 'keyring':
            durable = KeyringSessionScope(config.keyring_service)
        elif config.backend == 'file':
            durable = FileSessionScope(
                Path(config.storage_dir) / 'session.enc',
                config.encryption_secret.get_secret_value()
            )
        else:
            durable = MemorySessionScope()
        return cls(durable=durable, ephemeral=MemorySessionScope())

    def _scopes(self):
        return (self.durable, self.ephemeral)

    def read(self) -> Optional[SessionCredential]:
        """Return the active credential, or None before authentication"""
        for scope in self._scopes():
            token = scope.get(TOKEN_KEY)
            if token:
                return SessionCredential(token=token, user=self._load_user(scope))
        return None

    def read_token(self) -> Optional[str]:
        credential = self.read()
        return credential.token if credential else None

    def save(self, credential: SessionCredential, remember: bool = False):
        """Store a credential in the durable scope when remembered, else the ephemeral one"""
        scope = self.durable if remember else self.ephemeral
        scope.set(USER_KEY, json.dumps(credential.user))
        scope.set(TOKEN_KEY, credential.token)
        self.logger.info(f"Session stored in {scope.name} scope")

    def update_user(self, user: Dict[str, Any]) -> bool:
        """Rewrite the user record in the scope that currently holds one"""
        for scope in self._scopes():
            if scope.get(USER_KEY) is not None:
                scope.set(USER_KEY, json.dumps(user))
                return True
        return False

    def clear(self):
        """Remove token and user from both scopes"""
        for scope in self._scopes():
            scope.remove(TOKEN_KEY)
            scope.remove(USER_KEY)

    def has_session(self) -> bool:
        return self.read() is not None

    def _load_user(self, scope: SessionScope) -> Dict[str, Any]:
        raw = scope.get(USER_KEY)
        if not raw:
            return {}
        try:
            user = json.loads(raw)
        except json.JSONDecodeError:
            self.logger.warning(f"Discarding malformed user record in {scope.name} scope")
            return {}
        return user if isinstance(user, dict) else {}
