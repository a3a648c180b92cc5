from __future__ import annotations

import pytest

from relflow.release.model import parse_increment
from relflow.release.semver import Version, parse_version


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        ("major", Version(2, 0, 0)),
        ("minor", Version(1, 3, 0)),
        ("patch", Version(1, 2, 4)),
    ],
)
def test_bump_from_1_2_3(kind: str, expected: Version) -> None:
    increment = parse_increment(kind)
    assert increment is not None
    assert Version(1, 2, 3).bump(increment) == expected


def test_bump_resets_lower_components() -> None:
    assert Version(0, 9, 14).bump("major") == Version(1, 0, 0)
    assert Version(3, 9, 14).bump("minor") == Version(3, 10, 0)


def test_bump_is_monotonic() -> None:
    v = Version(1, 2, 3)
    assert v < v.bump("patch") < v.bump("minor") < v.bump("major")


def test_parse_version() -> None:
    assert parse_version("1.2.3") == Version(1, 2, 3)
    assert parse_version(" 10.0.1\n") == Version(10, 0, 1)


def test_parse_version_rejects_non_plain_versions() -> None:
    assert parse_version("v1.2.3") is None
    assert parse_version("1.2") is None
    assert parse_version("1.2.3-beta.1") is None
    assert parse_version("01.2.3") is None


def test_str() -> None:
    assert str(Version(1, 2, 4)) == "1.2.4"


def test_parse_increment() -> None:
    assert parse_increment("minor") == "minor"
    assert parse_increment("Patch") is None
    assert parse_increment("prerelease") is None
    assert parse_increment(None) is None
