"""Registry blob reachability audit."""

from regsweep.exceptions import ReconciliationError
from regsweep.keys import digest_from_blob_key, digest_from_link_body, is_blob_key, is_link_key
from regsweep.models import BlobRecord, ReconciliationResult
from regsweep.reconcile import reconcile

__all__ = [
    "BlobRecord",
    "ReconciliationError",
    "ReconciliationResult",
    "digest_from_blob_key",
    "digest_from_link_body",
    "is_blob_key",
    "is_link_key",
    "reconcile",
]
