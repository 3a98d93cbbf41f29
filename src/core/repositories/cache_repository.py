"""Abstract contract for the tenant-scoped key-value cache."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class KeyValueCache(ABC):
    """Contract for storing JSON values under ``<key>:<tenant_id>``.

    Implementations could be Redis, Memcached, an in-memory dict, etc.
    Entries never expire unless the implementation is configured to.
    """

    @abstractmethod
    def save(self, key: str, tenant_id: str, value: Any) -> None:
        """Serialize ``value`` to JSON and store it.

        Raises:
            SerializationError: If the value is not JSON-encodable
            CacheBackendError: If the store write fails
        """

    @abstractmethod
    def get(self, key: str, tenant_id: str, model: type[ModelT] | None = None) -> Any:
        """Return the stored value, decoded into ``model`` when one is given.

        Raises:
            NotFoundError: On a cache miss
            CacheBackendError: On transport failure
            DeserializationError: If the blob cannot populate the target
        """

    @abstractmethod
    def delete(self, key: str, tenant_id: str) -> None:
        """Remove a key. Absence of the key is not an error.

        Raises:
            CacheBackendError: On transport failure
        """

    @abstractmethod
    def save_token(self, tenant_id: str, token: str) -> None:
        """Store the raw bearer token currently issued to ``tenant_id``."""

    @abstractmethod
    def get_token(self, tenant_id: str) -> str:
        """Return the cached token, or ``""`` on a cache miss.

        Raises:
            CacheBackendError: On transport failure
        """

    @abstractmethod
    def delete_token(self, tenant_id: str) -> None:
        """Remove the cached token for ``tenant_id``."""
