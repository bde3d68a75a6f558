"""Core data models for regsweep."""

from regsweep.models.reconciliation import BlobRecord, ReconciliationResult, ReconciliationStats

__all__ = ["BlobRecord", "ReconciliationResult", "ReconciliationStats"]
