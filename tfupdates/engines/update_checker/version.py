"""Semantic version extraction and comparison."""

from __future__ import annotations

import re
from enum import IntEnum
from typing import NamedTuple

from packaging.version import Version

from tfupdates.exceptions import InvalidVersionError

# First major.minor.patch triple on a line; any prefix (~>, >=, v) is ignored.
VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")


class SemanticVersion(NamedTuple):
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class Comparison(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def extract_numeric_version(value: str) -> SemanticVersion | None:
    """Return the first ``major.minor.patch`` found in *value*, or None.

    The string is searched line by line, so a version on any line counts::

        >>> extract_numeric_version("~> 1.5.7")
        SemanticVersion(major=1, minor=5, patch=7)
        >>> extract_numeric_version("v2.0") is None
        True
    """
    for line in value.splitlines():
        m = VERSION_PATTERN.search(line)
        if m:
            return SemanticVersion(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return None


def compare(a: SemanticVersion, b: SemanticVersion) -> Comparison:
    """Three-field numeric comparison of two extracted versions."""
    left, right = Version(str(a)), Version(str(b))
    if left > right:
        return Comparison.GREATER
    if left < right:
        return Comparison.LESS
    return Comparison.EQUAL


def needs_update(latest: str, reference: str) -> bool:
    """True when *latest* is strictly newer than *reference*.

    Raises :class:`InvalidVersionError` naming the side that carries no
    semantic version; the latest side is checked first.
    """
    latest_version = extract_numeric_version(latest)
    if latest_version is None:
        raise InvalidVersionError("latest", latest)
    reference_version = extract_numeric_version(reference)
    if reference_version is None:
        raise InvalidVersionError("reference", reference)
    return compare(latest_version, reference_version) is Comparison.GREATER
