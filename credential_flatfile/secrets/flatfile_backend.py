# credential_flatfile/secrets/flatfile_backend.py

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

import structlog

from .base_backend import Credentials, SecretBackend
from .errors import (
    CorruptStoreError,
    CredentialsNotFoundError,
    MissingServerURLError,
    MissingUsernameOrRecordError,
    StoreReadError,
    StoreWriteError,
)
from .file_lock import file_lock
from .home import user_home_dir

logger = structlog.get_logger(__name__)

STORE_FILENAME = ".creds.json"
DEFAULT_LOCK_TIMEOUT = 10.0
FILE_MODE = 0o600


def default_store_path() -> Path:
    return Path(user_home_dir()) / STORE_FILENAME


class FlatfileBackend(SecretBackend):
    """
    Credential store kept in a single JSON file.

    Every operation takes the file lock, rebuilds the store from disk, applies
    its read or mutation and, for mutations, rewrites the whole file before the
    lock is released. Nothing is cached between operations.
    """

    def __init__(self, path: Optional[Path] = None, lock_timeout: float = DEFAULT_LOCK_TIMEOUT, strict: bool = False):
        """
        Args:
            path: Backing file; defaults to ``.creds.json`` in the user's home directory,
                resolved on each operation.
            lock_timeout: Seconds to wait for the inter-process lock.
            strict: Raise CorruptStoreError on malformed content instead of treating
                the store as empty.
        """
        self._path = Path(path) if path is not None else None
        self.lock_timeout = lock_timeout
        self.strict = strict

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else default_store_path()

    def store_credential(self, credentials: Credentials) -> None:
        if credentials is None:
            raise MissingUsernameOrRecordError()
        if not credentials.server_url:
            raise MissingServerURLError()
        with self._open_store() as (path, store):
            store[credentials.server_url] = credentials
            self._write_store(path, store)
        logger.info("Stored credentials", server_url=credentials.server_url, username=credentials.username)

    def delete_credential(self, server_url: str) -> None:
        if not server_url:
            raise MissingServerURLError()
        with self._open_store() as (path, store):
            removed = store.pop(server_url, None) is not None
            self._write_store(path, store)
        logger.info("Erased credentials", server_url=server_url, found=removed)

    def get_credential(self, server_url: str) -> Tuple[str, str]:
        if not server_url:
            raise MissingServerURLError()
        with self._open_store() as (_, store):
            credentials = store.get(server_url)
        if credentials is None:
            raise CredentialsNotFoundError()
        return credentials.username, credentials.secret

    def list_credentials(self) -> Dict[str, str]:
        with self._open_store() as (_, store):
            return {server_url: creds.username for server_url, creds in store.items()}

    @contextmanager
    def _open_store(self) -> Iterator[Tuple[Path, Dict[str, Credentials]]]:
        path = self.path
        with file_lock(path, self.lock_timeout):
            yield path, self._read_store(path)

    def _read_store(self, path: Path) -> Dict[str, Credentials]:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("Store file absent, starting empty", path=str(path))
            return {}
        except OSError as e:
            raise StoreReadError(str(e)) from e

        if not raw.strip():
            return {}

        try:
            store = self._decode(raw)
        except (ValueError, TypeError, RecursionError) as e:
            if self.strict:
                raise CorruptStoreError(str(e)) from e
            logger.warning("Ignoring malformed credential store", path=str(path), error=str(e))
            return {}
        logger.debug("Loaded credential store", path=str(path), records=len(store))
        return store

    @staticmethod
    def _decode(raw: bytes) -> Dict[str, Credentials]:
        document = json.loads(raw.decode("utf-8"))
        if not isinstance(document, dict):
            raise TypeError("top level must be an object")
        entries = document.get("store")
        if entries is None:
            return {}
        if not isinstance(entries, dict):
            raise TypeError("'store' must be an object")
        return {server_url: Credentials.from_dict(entry) for server_url, entry in entries.items()}

    def _write_store(self, path: Path, store: Dict[str, Credentials]) -> None:
        payload = json.dumps({"store": {url: creds.to_dict() for url, creds in store.items()}})
        tmp_path = None
        try:
            # Replace the symlink target, not the link itself.
            target = path.resolve()
            target.parent.mkdir(parents=True, exist_ok=True)
            # mkstemp creates the file with mode 0600 already.
            fd, tmp_path = tempfile.mkstemp(dir=str(target.parent), prefix=target.name + ".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                tmp_file.write(payload)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.chmod(tmp_path, FILE_MODE)
            os.replace(tmp_path, str(target))
        except (OSError, RuntimeError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreWriteError(str(e)) from e
        logger.debug("Saved credential store", path=str(path), records=len(store))
