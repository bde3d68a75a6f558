from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from regsweep import cli
from regsweep.config import RegistryConfig, Settings
from regsweep.exceptions import StorageError
from regsweep.keys import blob_key
from regsweep.storage.base import ObjectStorage

A = "a" * 64
B = "b" * 64
C = "c" * 64
D = "d" * 64


def _write(root: Path, key: str, data: bytes = b"") -> None:
    path = root / key
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


@pytest.fixture()
def registry_dir(settings: Settings) -> Path:
    root = Path(settings.local_dir) / settings.registry.bucket
    for digest in (A, B, C):
        _write(root, blob_key(digest), b"layer")
    links = {
        f"docker/registry/v2/repositories/app/_layers/sha256/{A}/link": A,
        f"docker/registry/v2/repositories/app/_manifests/revisions/sha256/{A}/link": A,
        f"docker/registry/v2/repositories/old/_layers/sha256/{D}/link": D,
    }
    for key, digest in links.items():
        _write(root, key, f"sha256:{digest}".encode())
    return root


class _BrokenStorage(ObjectStorage):
    async def iter_keys(self, bucket: str, prefix: str) -> AsyncIterator[str]:
        raise StorageError("listing exploded", bucket=bucket)
        yield prefix  # pragma: no cover

    async def get_object_body(self, bucket: str, key: str) -> bytes:  # pragma: no cover
        raise AssertionError("not reached")


def test_cli_prints_report_and_totals(settings: Settings, registry_dir: Path, capsys) -> None:
    code = cli.main([], settings=settings)

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out == [
        f"{A} true",
        f"{B} false",
        f"{C} false",
        "Total blobs found: 3",
        "Blobs used by manifests: 1",
    ]


def test_cli_orphans_only(settings: Settings, registry_dir: Path, capsys) -> None:
    code = cli.main(["--orphans-only", "--concurrency", "1"], settings=settings)

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out == [
        f"{B} false",
        f"{C} false",
        "Total blobs found: 3",
        "Blobs used by manifests: 1",
    ]


def test_cli_succeeds_when_everything_is_orphaned(settings: Settings, tmp_path: Path, capsys) -> None:
    _write(Path(settings.local_dir) / "other", blob_key(A))

    code = cli.main(["--bucket", "other"], settings=settings)

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[-2:] == ["Total blobs found: 1", "Blobs used by manifests: 0"]


def test_cli_returns_1_on_reconciliation_error(settings: Settings, monkeypatch, capsys) -> None:
    monkeypatch.setattr(cli, "get_object_storage", lambda _settings: _BrokenStorage())

    code = cli.main([], settings=settings)

    assert code == 1
    assert capsys.readouterr().out == ""


def test_cli_requires_bucket_for_s3(settings: Settings, capsys) -> None:
    settings.registry = RegistryConfig(bucket="")

    code = cli.main(["--backend", "s3"], settings=settings)

    assert code == 2
    assert "REGISTRY_BUCKET" in capsys.readouterr().err


def test_cli_rejects_bad_concurrency(settings: Settings, capsys) -> None:
    code = cli.main(["--concurrency", "0"], settings=settings)

    assert code == 2
    assert "--concurrency" in capsys.readouterr().err


def test_apply_overrides_updates_settings(settings: Settings) -> None:
    args = cli.build_parser().parse_args(
        ["--bucket", "b", "--root", "r", "--backend", "s3", "--local-dir", "/x", "--concurrency", "4"]
    )

    cli.apply_overrides(settings, args)

    assert settings.registry.bucket == "b"
    assert settings.registry.root == "r"
    assert settings.backend == "s3"
    assert settings.local_dir == "/x"
    assert settings.reconcile.link_fetch_concurrency == 4
