"""regsweep exception hierarchy."""

from __future__ import annotations

from regsweep.error_codes import ErrorCode


class RegSweepError(Exception):
    """Base error for regsweep."""


class ConfigurationError(RegSweepError):
    """Raised when configuration or inputs are invalid."""


class InvalidKeyError(RegSweepError):
    """Raised when a storage key does not have the expected layout."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{message}: {key!r}")
        self.key = key
        self.message = message


class StorageError(RegSweepError):
    """Raised when a storage backend call fails."""

    def __init__(
        self,
        message: str,
        *,
        bucket: str | None = None,
        key: str | None = None,
        error_code: ErrorCode | str | None = ErrorCode.STORAGE_FAILED,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.bucket = bucket
        self.key = key
        self.error_code = error_code


class ObjectNotFoundError(StorageError):
    """Raised when a requested object does not exist."""

    def __init__(self, message: str, *, bucket: str | None = None, key: str | None = None) -> None:
        super().__init__(message, bucket=bucket, key=key, error_code=ErrorCode.OBJECT_NOT_FOUND)


class StorageTimeoutError(StorageError, TimeoutError):
    """Raised when a storage backend call times out."""


class ReconciliationError(RegSweepError):
    """Raised when a reconciliation run cannot produce a trustworthy result."""

    def __init__(
        self,
        phase: str,
        message: str,
        *,
        prefix: str | None = None,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        head = f"{phase}"
        if prefix:
            head = f"{head} (prefix={prefix})"
        super().__init__(f"{head}: {message}")
        self.phase = phase
        self.prefix = prefix
        self.message = message
        self.error_code = error_code
