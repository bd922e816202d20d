# credential_flatfile/secrets/errors.py

from typing import Optional


class CredentialStoreError(Exception):
    """Base class for every error the credential store reports to its caller."""

    message = "credential store error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class MissingServerURLError(CredentialStoreError):
    message = "no credentials server URL"


class MissingUsernameOrRecordError(CredentialStoreError):
    message = "no credentials username"


class CredentialsNotFoundError(CredentialStoreError):
    message = "credentials not found in native keychain"


class LockError(CredentialStoreError):
    message = "unable to lock file"


class LockTimeoutError(LockError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"timed out after {timeout:g} seconds")


class StoreIOError(CredentialStoreError):
    message = "unable to access file"


class StoreReadError(StoreIOError):
    message = "unable to read file"


class StoreWriteError(StoreIOError):
    message = "unable to write file"


class CorruptStoreError(CredentialStoreError):
    message = "credential store is corrupt"
