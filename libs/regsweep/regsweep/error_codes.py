"""Canonical error codes surfaced to operators."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"

    LISTING_FAILED = "LISTING_FAILED"
    LISTING_TIMEOUT = "LISTING_TIMEOUT"
    LINK_FETCH_TIMEOUT = "LINK_FETCH_TIMEOUT"

    OBJECT_NOT_FOUND = "OBJECT_NOT_FOUND"
    STORAGE_FAILED = "STORAGE_FAILED"
