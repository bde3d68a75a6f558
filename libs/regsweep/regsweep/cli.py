"""Command-line entry point: print the reachability audit for a registry."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from regsweep.config import STORAGE_BACKENDS, Settings
from regsweep.exceptions import ConfigurationError, ReconciliationError
from regsweep.models import ReconciliationResult
from regsweep.reconcile import reconcile
from regsweep.storage import get_object_storage
from regsweep.utils.logging_setup import setup_logging

logger = logging.getLogger("regsweep.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regsweep",
        description="Report which registry blobs are referenced by repository links.",
    )
    parser.add_argument("--bucket", default=None, help="Bucket name (default: REGISTRY_BUCKET)")
    parser.add_argument("--root", default=None, help="Registry root prefix (default: REGISTRY_ROOT)")
    parser.add_argument("--backend", choices=STORAGE_BACKENDS, default=None)
    parser.add_argument("--local-dir", default=None, help="Base directory for the local backend")
    parser.add_argument("--concurrency", type=int, default=None, help="Parallel link fetches")
    parser.add_argument(
        "--orphans-only",
        action="store_true",
        default=False,
        help="Only list unreferenced blobs (summary still counts every blob)",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.bucket is not None:
        settings.registry.bucket = str(args.bucket)
    if args.root is not None:
        settings.registry.root = str(args.root)
    if args.backend is not None:
        settings.storage_backend = str(args.backend)
    if args.local_dir is not None:
        settings.local_dir = str(args.local_dir)
    if args.concurrency is not None:
        if int(args.concurrency) < 1:
            raise ConfigurationError("--concurrency must be >= 1")
        settings.reconcile.link_fetch_concurrency = int(args.concurrency)
    return settings


def write_report(result: ReconciliationResult, out: TextIO, *, orphans_only: bool = False) -> None:
    for record in result.records():
        if orphans_only and record.referenced:
            continue
        out.write(f"{record.digest} {str(record.referenced).lower()}\n")
    out.write(f"Total blobs found: {result.total_blobs}\n")
    out.write(f"Blobs used by manifests: {result.referenced_blobs}\n")


async def _run(settings: Settings, *, orphans_only: bool) -> int:
    storage = get_object_storage(settings)
    try:
        result = await reconcile(
            storage,
            settings.registry.bucket,
            root=settings.registry.root,
            link_fetch_concurrency=settings.reconcile.link_fetch_concurrency,
        )
    except ReconciliationError as exc:
        logger.error("error reading registry (code=%s): %s", exc.error_code, exc)
        return 1

    write_report(result, sys.stdout, orphans_only=orphans_only)
    return 0


def main(argv: Sequence[str] | None = None, *, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or Settings()
    setup_logging(settings)

    try:
        apply_overrides(settings, args)
        settings.validate_for_run()
    except ConfigurationError as exc:
        print(f"regsweep: {exc}", file=sys.stderr)
        return 2

    return asyncio.run(_run(settings, orphans_only=bool(args.orphans_only)))
