# credential_flatfile/secrets/base_backend.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass
class Credentials:
    """One stored record: the credentials for a single server URL."""

    server_url: str
    username: str = ""
    secret: str = ""

    def to_dict(self) -> Dict[str, str]:
        # Field names match the Docker credential-helper wire format.
        return {"ServerURL": self.server_url, "Username": self.username, "Secret": self.secret}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "Credentials":
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        values = {}
        for key in ("ServerURL", "Username", "Secret"):
            value = data.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise TypeError(f"field '{key}' must be a string")
            values[key] = value
        return cls(server_url=values["ServerURL"], username=values["Username"], secret=values["Secret"])


class SecretBackend(ABC):
    @abstractmethod
    def store_credential(self, credentials: Credentials) -> None:
        pass

    @abstractmethod
    def delete_credential(self, server_url: str) -> None:
        pass

    @abstractmethod
    def get_credential(self, server_url: str) -> Tuple[str, str]:
        pass

    @abstractmethod
    def list_credentials(self) -> Dict[str, str]:
        pass
