"""Blob reachability reconciliation.

A run has two passes over the bucket:

1. list ``<root>/blobs`` and record every blob digest as unreferenced;
2. list ``<root>/repositories``, read each link body and mark the digest it
   names as referenced.

Pass 2 only flips records that pass 1 created, so the passes must run in this
order. Listing failures abort the run; per-key anomalies are logged, counted
and skipped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable, Iterator
from contextlib import contextmanager

from regsweep.error_codes import ErrorCode
from regsweep.exceptions import InvalidKeyError, ReconciliationError, StorageError
from regsweep.keys import (
    DEFAULT_ROOT,
    blobs_prefix,
    digest_from_blob_key,
    digest_from_link_body,
    is_blob_key,
    is_link_key,
    repositories_prefix,
)
from regsweep.models import BlobRecord, ReconciliationResult, ReconciliationStats
from regsweep.storage.base import ObjectStorage

logger = logging.getLogger(__name__)

# Link keys buffered per worker before a batch of fetches is awaited.
_KEYS_PER_WORKER = 16


@contextmanager
def _listing_guard(phase: str, prefix: str) -> Iterator[None]:
    try:
        yield
    except TimeoutError as exc:
        raise ReconciliationError(
            phase,
            f"listing timed out: {exc}",
            prefix=prefix,
            error_code=ErrorCode.LISTING_TIMEOUT,
        ) from exc
    except StorageError as exc:
        raise ReconciliationError(
            phase,
            f"listing failed: {exc}",
            prefix=prefix,
            error_code=ErrorCode.LISTING_FAILED,
        ) from exc


async def discover_blobs(
    storage: ObjectStorage,
    bucket: str,
    prefix: str,
    *,
    stats: ReconciliationStats | None = None,
) -> dict[str, BlobRecord]:
    """Build the digest universe from blob data keys under `prefix`."""
    stats = stats if stats is not None else ReconciliationStats()
    blobs: dict[str, BlobRecord] = {}

    with _listing_guard("blobs", prefix):
        async for key in storage.iter_keys(bucket, prefix):
            if not is_blob_key(key):
                stats.skipped_keys += 1
                continue
            try:
                digest = digest_from_blob_key(key)
            except InvalidKeyError as exc:
                stats.malformed_blob_keys += 1
                logger.debug("blob key skipped: %s", exc)
                continue
            stats.blob_keys += 1
            blobs[digest] = BlobRecord(digest=digest)

    return blobs


async def resolve_link_digests(
    storage: ObjectStorage,
    bucket: str,
    prefix: str,
    *,
    concurrency: int = 8,
    stats: ReconciliationStats | None = None,
) -> AsyncIterator[list[str]]:
    """Yield batches of digests named by the link objects under `prefix`.

    Link bodies are fetched with at most `concurrency` requests in flight.
    Unreadable links are skipped; a fetch timeout aborts the run.
    """
    stats = stats if stats is not None else ReconciliationStats()
    workers = max(1, int(concurrency))
    sem = asyncio.Semaphore(workers)
    batch_size = workers * _KEYS_PER_WORKER

    async def _fetch(key: str) -> str | None:
        async with sem:
            try:
                return digest_from_link_body(await storage.get_object_text(bucket, key))
            except TimeoutError as exc:
                raise ReconciliationError(
                    "links",
                    f"timed out reading link {key!r}: {exc}",
                    prefix=prefix,
                    error_code=ErrorCode.LINK_FETCH_TIMEOUT,
                ) from exc
            except (StorageError, UnicodeDecodeError) as exc:
                stats.unreadable_links += 1
                logger.warning("link skipped (key=%s): %s", key, exc)
                return None

    async def _flush(keys: list[str]) -> list[str]:
        # A fatal fetch cancels the rest of the batch before the error surfaces.
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(_fetch(k)) for k in keys]
        except BaseExceptionGroup as group:
            raise group.exceptions[0]
        return [digest for digest in (t.result() for t in tasks) if digest is not None]

    pending: list[str] = []
    with _listing_guard("links", prefix):
        async for key in storage.iter_keys(bucket, prefix):
            if not is_link_key(key):
                stats.skipped_keys += 1
                continue
            stats.link_keys += 1
            pending.append(key)
            if len(pending) >= batch_size:
                batch, pending = pending, []
                yield await _flush(batch)

    if pending:
        yield await _flush(pending)


def mark_referenced(blobs: dict[str, BlobRecord], digests: Iterable[str]) -> int:
    """Flag every known digest in `digests` as referenced.

    Unknown digests are ignored. Returns how many digests matched a record.
    """
    matched = 0
    for digest in digests:
        record = blobs.get(digest)
        if record is None:
            logger.debug("dangling link target (digest=%s)", digest)
            continue
        record.referenced = True
        matched += 1
    return matched


async def reconcile(
    storage: ObjectStorage,
    bucket: str,
    *,
    root: str = DEFAULT_ROOT,
    link_fetch_concurrency: int = 8,
) -> ReconciliationResult:
    """Classify every blob in the registry as referenced or orphaned.

    Raises ReconciliationError when either listing fails, in which case no
    partial result is produced.
    """
    stats = ReconciliationStats()

    blob_prefix = blobs_prefix(root)
    logger.info("scanning blobs (bucket=%s, prefix=%s)", bucket, blob_prefix)
    blobs = await discover_blobs(storage, bucket, blob_prefix, stats=stats)
    logger.info("blob scan done (blobs=%d, keys=%d)", len(blobs), stats.blob_keys)

    link_prefix = repositories_prefix(root)
    logger.info(
        "resolving links (bucket=%s, prefix=%s, concurrency=%d)",
        bucket,
        link_prefix,
        link_fetch_concurrency,
    )
    async for digests in resolve_link_digests(
        storage,
        bucket,
        link_prefix,
        concurrency=link_fetch_concurrency,
        stats=stats,
    ):
        matched = mark_referenced(blobs, digests)
        stats.dangling_links += len(digests) - matched

    result = ReconciliationResult(blobs, stats)
    logger.info(
        "reconciliation done (blobs=%d, referenced=%d, links=%d, unreadable=%d, dangling=%d)",
        result.total_blobs,
        result.referenced_blobs,
        stats.link_keys,
        stats.unreadable_links,
        stats.dangling_links,
    )
    return result
