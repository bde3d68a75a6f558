"""Storage key classification for the registry's blob and repository namespaces.

Blob data lives at::

    <root>/blobs/<algorithm>/<shard>/<digest>/data

and repository links at::

    <root>/repositories/<name>/.../link

where each link body names the digest it points at (``sha256:<hex>``).
Everything here is pure string handling.
"""

from __future__ import annotations

from regsweep.exceptions import InvalidKeyError

DEFAULT_ROOT = "docker/registry/v2"
DEFAULT_DIGEST_ALGORITHM = "sha256"

BLOBS_SEGMENT = "blobs"
REPOSITORIES_SEGMENT = "repositories"
BLOB_DATA_SUFFIX = "/data"
LINK_SUFFIX = "/link"

_LINK_DIGEST_PREFIX = f"{DEFAULT_DIGEST_ALGORITHM}:"


def _join(root: str, segment: str) -> str:
    base = str(root or "").strip().strip("/")
    return f"{base}/{segment}" if base else segment


def blobs_prefix(root: str = DEFAULT_ROOT) -> str:
    return _join(root, BLOBS_SEGMENT)


def repositories_prefix(root: str = DEFAULT_ROOT) -> str:
    return _join(root, REPOSITORIES_SEGMENT)


def blob_key(
    digest: str,
    *,
    root: str = DEFAULT_ROOT,
    algorithm: str = DEFAULT_DIGEST_ALGORITHM,
) -> str:
    """Build the data key for `digest`, sharded by its first two characters."""
    return f"{blobs_prefix(root)}/{algorithm}/{digest[:2]}/{digest}{BLOB_DATA_SUFFIX}"


def is_blob_key(key: str) -> bool:
    return BLOBS_SEGMENT in key and key.endswith(BLOB_DATA_SUFFIX)


def is_link_key(key: str) -> bool:
    return REPOSITORIES_SEGMENT in key and key.endswith(LINK_SUFFIX)


def digest_from_blob_key(key: str) -> str:
    """Return the digest segment of a blob data key.

    Only the suffix and segment position are checked; algorithm and shard
    segments are taken as-is.
    """
    if not key.endswith(BLOB_DATA_SUFFIX):
        raise InvalidKeyError(key, "blob key does not end with /data")
    return key.split("/")[-2]


def digest_from_link_body(body: str | bytes) -> str:
    """Return the digest a link body points at.

    Bodies without the ``sha256:`` prefix pass through unchanged.
    """
    text = body.decode("utf-8") if isinstance(body, bytes) else str(body)
    if text.startswith(_LINK_DIGEST_PREFIX):
        return text[len(_LINK_DIGEST_PREFIX):]
    return text
