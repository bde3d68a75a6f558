"""Object storage interface consumed by the reconciler."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class ObjectStorage(ABC):
    @abstractmethod
    def iter_keys(self, bucket: str, prefix: str) -> AsyncIterator[str]:
        """Yield every key under `prefix`, fetching listing pages lazily.

        Each call restarts the listing from the beginning. Listing failures
        raise StorageError (StorageTimeoutError on timeouts).
        """

    @abstractmethod
    async def get_object_body(self, bucket: str, key: str) -> bytes:
        """Return the full object body."""

    async def get_object_text(self, bucket: str, key: str) -> str:
        return (await self.get_object_body(bucket, key)).decode("utf-8")
