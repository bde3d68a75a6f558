"""Reconciliation result models."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass


@dataclass
class BlobRecord:
    digest: str
    referenced: bool = False


@dataclass
class ReconciliationStats:
    """Per-run diagnostic counters; they never affect the result mapping."""

    blob_keys: int = 0
    skipped_keys: int = 0
    malformed_blob_keys: int = 0
    link_keys: int = 0
    unreadable_links: int = 0
    dangling_links: int = 0


class ReconciliationResult(Mapping[str, BlobRecord]):
    """Read-only view of digest -> BlobRecord produced by one run."""

    def __init__(
        self,
        blobs: dict[str, BlobRecord],
        stats: ReconciliationStats | None = None,
    ) -> None:
        self._blobs = blobs
        self.stats = stats or ReconciliationStats()

    def __getitem__(self, digest: str) -> BlobRecord:
        return self._blobs[digest]

    def __iter__(self) -> Iterator[str]:
        return iter(self._blobs)

    def __len__(self) -> int:
        return len(self._blobs)

    def __repr__(self) -> str:
        return (
            f"ReconciliationResult(total_blobs={self.total_blobs}, "
            f"referenced_blobs={self.referenced_blobs})"
        )

    @property
    def total_blobs(self) -> int:
        return len(self._blobs)

    @property
    def referenced_blobs(self) -> int:
        return sum(1 for record in self._blobs.values() if record.referenced)

    def records(self) -> list[BlobRecord]:
        return [self._blobs[d] for d in sorted(self._blobs)]

    def orphans(self) -> list[BlobRecord]:
        return [record for record in self.records() if not record.referenced]
