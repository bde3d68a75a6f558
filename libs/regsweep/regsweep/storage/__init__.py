"""Object storage backends."""

from regsweep.config import Settings
from regsweep.storage.base import ObjectStorage
from regsweep.storage.local_store import LocalObjectStorage
from regsweep.storage.s3_store import S3ObjectStorage


def get_object_storage(settings: Settings) -> ObjectStorage:
    if settings.backend == "local":
        return LocalObjectStorage(settings.local_dir)
    return S3ObjectStorage(
        endpoint=settings.s3.endpoint,
        region=settings.s3.region,
        access_key=settings.s3.access_key,
        secret_key=settings.s3.secret_key,
        page_size=settings.s3.page_size,
        connect_timeout=settings.s3.connect_timeout,
        read_timeout=settings.s3.read_timeout,
        max_attempts=settings.s3.max_attempts,
    )


__all__ = ["LocalObjectStorage", "ObjectStorage", "S3ObjectStorage", "get_object_storage"]
