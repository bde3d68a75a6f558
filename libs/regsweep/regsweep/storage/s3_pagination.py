"""Shared S3 pagination helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)


def iter_list_objects_v2(
    client: Any,
    *,
    bucket: str,
    page_size: int | None = None,
    **kwargs: Any,
) -> Iterator[dict[str, Any]]:
    """Iterate over `list_objects_v2` result pages.

    Pages are requested one at a time as the iterator advances; the page size
    is only a hint, the backend may return fewer keys per page.
    """

    token: str | None = None
    page = 0
    while True:
        call_kwargs: dict[str, Any] = {"Bucket": bucket, **kwargs}
        if page_size:
            call_kwargs["MaxKeys"] = int(page_size)
        if token:
            call_kwargs["ContinuationToken"] = token

        resp: dict[str, Any] = dict(client.list_objects_v2(**call_kwargs))
        page += 1
        logger.debug(
            "s3 list page (bucket=%s, prefix=%s, page=%d, keys=%d)",
            bucket,
            kwargs.get("Prefix"),
            page,
            int(resp.get("KeyCount") or len(resp.get("Contents") or [])),
        )
        yield resp

        if resp.get("IsTruncated"):
            token = str(resp.get("NextContinuationToken") or "")
            if not token:
                break
            continue

        break
