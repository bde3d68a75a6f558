from __future__ import annotations

import pytest

from regsweep.exceptions import InvalidKeyError
from regsweep.keys import (
    blob_key,
    blobs_prefix,
    digest_from_blob_key,
    digest_from_link_body,
    is_blob_key,
    is_link_key,
    repositories_prefix,
)

DIGEST = "0002845795df2438ed1c832452431f106e633eff7fff00bddd65863c60bcba75"


def test_blob_key_layout() -> None:
    assert blob_key(DIGEST) == f"docker/registry/v2/blobs/sha256/00/{DIGEST}/data"
    assert blob_key("abc", root="/custom/root/") == "custom/root/blobs/sha256/ab/abc/data"


def test_prefixes_ignore_trailing_slashes() -> None:
    assert blobs_prefix("docker/registry/v2/") == "docker/registry/v2/blobs"
    assert repositories_prefix("docker/registry/v2") == "docker/registry/v2/repositories"
    assert blobs_prefix("") == "blobs"


def test_digest_from_blob_key_inverts_blob_key() -> None:
    for digest in (DIGEST, "abc123", "ff"):
        assert digest_from_blob_key(blob_key(digest)) == digest


def test_digest_from_blob_key_ignores_algorithm_and_shard() -> None:
    assert digest_from_blob_key("x/blobs/sha512/zz/deadbeef/data") == "deadbeef"


def test_digest_from_blob_key_requires_data_suffix() -> None:
    with pytest.raises(InvalidKeyError) as exc_info:
        digest_from_blob_key(f"docker/registry/v2/blobs/sha256/00/{DIGEST}/startedat")
    assert exc_info.value.key.endswith("/startedat")


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        (f"docker/registry/v2/blobs/sha256/00/{DIGEST}/data", True),
        (f"docker/registry/v2/blobs/sha256/00/{DIGEST}/data.tmp", False),
        (f"docker/registry/v2/blobs/sha256/00/{DIGEST}", False),
        ("docker/registry/v2/uploads/abc/data", False),
        ("docker/registry/v2/repositories/app/_layers/sha256/abc/link", False),
    ],
)
def test_is_blob_key(key: str, expected: bool) -> None:
    assert is_blob_key(key) is expected


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("docker/registry/v2/repositories/app/_layers/sha256/abc/link", True),
        ("docker/registry/v2/repositories/team/app/_manifests/tags/latest/current/link", True),
        ("docker/registry/v2/repositories/app/_uploads/abc/startedat", False),
        ("docker/registry/v2/blobs/sha256/ab/abc/link", False),
        ("docker/registry/v2/repositories/app/_layers/sha256/abc/linked", False),
    ],
)
def test_is_link_key(key: str, expected: bool) -> None:
    assert is_link_key(key) is expected


def test_blob_and_link_namespaces_are_disjoint() -> None:
    keys = [
        blob_key(DIGEST),
        f"docker/registry/v2/repositories/app/_layers/sha256/{DIGEST}/link",
        f"docker/registry/v2/repositories/app/_manifests/revisions/sha256/{DIGEST}/link",
    ]
    for key in keys:
        assert not (is_blob_key(key) and is_link_key(key))


def test_digest_from_link_body() -> None:
    assert digest_from_link_body("sha256:abc123") == "abc123"
    assert digest_from_link_body("abc123") == "abc123"
    assert digest_from_link_body(b"sha256:abc123") == "abc123"


def test_digest_from_link_body_passes_unknown_formats_through() -> None:
    assert digest_from_link_body("sha512:abc") == "sha512:abc"
    assert digest_from_link_body("") == ""


def test_digest_from_link_body_rejects_invalid_utf8() -> None:
    with pytest.raises(UnicodeDecodeError):
        digest_from_link_body(b"\xff\xfe")
