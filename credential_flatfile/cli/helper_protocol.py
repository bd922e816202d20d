# credential_flatfile/cli/helper_protocol.py

import json
from typing import Dict, TextIO

import structlog

from credential_flatfile.secrets.base_backend import Credentials, SecretBackend
from credential_flatfile.secrets.errors import (
    CredentialStoreError,
    MissingServerURLError,
    MissingUsernameOrRecordError,
)

logger = structlog.get_logger(__name__)


class RequestDecodeError(CredentialStoreError):
    message = "unable to decode credentials"


class HelperProtocolRunner:
    """
    Speaks the Docker credential-helper protocol on top of a SecretBackend.

    Each command reads its request from ``stdin`` and writes its response to
    ``stdout``. Errors are left to propagate; ``main`` turns them into the
    protocol's failure response.
    """

    def __init__(self, backend: SecretBackend, stdin: TextIO, stdout: TextIO):
        self.backend = backend
        self.stdin = stdin
        self.stdout = stdout

    def store(self) -> None:
        credentials = self._read_credentials()
        if not credentials.server_url:
            raise MissingServerURLError()
        if not credentials.username:
            raise MissingUsernameOrRecordError()
        self.backend.store_credential(credentials)

    def get(self) -> None:
        server_url = self._read_server_url()
        username, secret = self.backend.get_credential(server_url)
        self._write_json(Credentials(server_url=server_url, username=username, secret=secret).to_dict())

    def erase(self) -> None:
        self.backend.delete_credential(self._read_server_url())

    def list(self) -> None:
        self._write_json(self.backend.list_credentials())

    def _read_server_url(self) -> str:
        try:
            server_url = self.stdin.read().strip()
        except UnicodeDecodeError as e:
            raise RequestDecodeError(str(e)) from e
        if not server_url:
            raise MissingServerURLError()
        return server_url

    def _read_credentials(self) -> Credentials:
        try:
            payload = json.loads(self.stdin.read())
            return Credentials.from_dict(payload)
        except (ValueError, TypeError) as e:
            raise RequestDecodeError(str(e)) from e

    def _write_json(self, payload: Dict[str, str]) -> None:
        self.stdout.write(json.dumps(payload))
        self.stdout.write("\n")
        self.stdout.flush()
