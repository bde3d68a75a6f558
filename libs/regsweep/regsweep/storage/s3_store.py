"""S3/MinIO object storage implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ConnectTimeoutError, ReadTimeoutError

from regsweep.exceptions import ObjectNotFoundError, StorageError, StorageTimeoutError
from regsweep.storage.base import ObjectStorage
from regsweep.storage.s3_pagination import iter_list_objects_v2

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3ObjectStorage(ObjectStorage):
    """Reads a registry stored in S3 or an S3-compatible service."""

    def __init__(
        self,
        endpoint: str | None = None,
        region: str = "us-east-1",
        access_key: str | None = None,
        secret_key: str | None = None,
        *,
        page_size: int = 1000,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0,
        max_attempts: int = 5,
    ) -> None:
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.region = region
        self.access_key = access_key or None
        self.secret_key = secret_key or None
        self.page_size = max(1, int(page_size))
        self.connect_timeout = float(connect_timeout)
        self.read_timeout = float(read_timeout)
        self.max_attempts = max(1, int(max_attempts))

        self._client: Any | None = None

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client

        import boto3

        s3_options: dict[str, Any] = {}
        if self.endpoint:
            s3_options["addressing_style"] = "path"

        try:
            self._client = boto3.client(
                "s3",
                endpoint_url=self.endpoint,
                region_name=self.region,
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
                config=Config(
                    s3=s3_options or None,
                    connect_timeout=self.connect_timeout,
                    read_timeout=self.read_timeout,
                    retries={"max_attempts": self.max_attempts, "mode": "standard"},
                ),
            )
        except (BotoCoreError, ValueError) as exc:
            # botocore rejects malformed endpoints with a bare ValueError.
            raise StorageError(f"Failed to create S3 client (endpoint={self.endpoint!r}): {exc}") from exc
        return self._client

    async def iter_keys(self, bucket: str, prefix: str) -> AsyncIterator[str]:
        client = self._ensure_client()
        pages = iter_list_objects_v2(client, bucket=bucket, page_size=self.page_size, Prefix=prefix)

        while True:
            try:
                resp = await asyncio.to_thread(next, pages, None)
            except (ConnectTimeoutError, ReadTimeoutError) as exc:
                raise StorageTimeoutError(
                    f"Timed out listing s3://{bucket}/{prefix}: {exc}", bucket=bucket
                ) from exc
            except (ClientError, BotoCoreError) as exc:
                raise StorageError(
                    f"Failed to list s3://{bucket}/{prefix}: {exc}", bucket=bucket
                ) from exc
            if resp is None:
                return

            for obj in resp.get("Contents") or []:
                key = str(obj.get("Key") or "")
                if key:
                    yield key

    async def get_object_body(self, bucket: str, key: str) -> bytes:
        client = self._ensure_client()

        def _get() -> bytes:
            resp = client.get_object(Bucket=bucket, Key=key)
            return bytes(resp["Body"].read())

        try:
            return await asyncio.to_thread(_get)
        except (ConnectTimeoutError, ReadTimeoutError) as exc:
            raise StorageTimeoutError(
                f"Timed out reading s3://{bucket}/{key}: {exc}", bucket=bucket, key=key
            ) from exc
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", "") or "")
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(f"S3 object not found: {key}", bucket=bucket, key=key) from exc
            raise StorageError(f"Failed to read s3://{bucket}/{key}: {exc}", bucket=bucket, key=key) from exc
        except BotoCoreError as exc:
            raise StorageError(f"Failed to read s3://{bucket}/{key}: {exc}", bucket=bucket, key=key) from exc
