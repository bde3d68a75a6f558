"""Filesystem object storage for registries using the filesystem driver."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path

from regsweep.exceptions import ObjectNotFoundError, StorageError
from regsweep.storage.base import ObjectStorage


class LocalObjectStorage(ObjectStorage):
    """Treats `{base_dir}/{bucket}` as a bucket and relative POSIX paths as keys."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)

    def _bucket_root(self, bucket: str) -> Path:
        name = str(bucket or "").strip().strip("/")
        return self.base_dir / name if name else self.base_dir

    def _list_sync(self, bucket: str, prefix: str) -> list[str]:
        root = self._bucket_root(bucket)
        base = root / prefix.strip("/") if prefix.strip("/") else root
        if not base.exists():
            return []
        return sorted(p.relative_to(root).as_posix() for p in base.rglob("*") if p.is_file())

    async def iter_keys(self, bucket: str, prefix: str) -> AsyncIterator[str]:
        try:
            keys = await asyncio.to_thread(self._list_sync, bucket, prefix)
        except OSError as exc:
            raise StorageError(
                f"Failed to list {self._bucket_root(bucket)} (prefix={prefix!r}): {exc}",
                bucket=bucket,
            ) from exc
        for key in keys:
            yield key

    async def get_object_body(self, bucket: str, key: str) -> bytes:
        path = self._bucket_root(bucket) / key
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(f"Local object not found: {key}", bucket=bucket, key=key) from exc
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}", bucket=bucket, key=key) from exc
