"""Dotted numeric version parsing and comparison.

Windows SDK directories are named like ``10.0.26100.0``. Comparing those
names as strings orders ``10.0.9.0`` above ``10.0.26100.0``, so every
comparison here goes through ``packaging.version.Version``, which compares
release components as integers and pads missing trailing components with
zero.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

SDK_VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+\.\d+$")


def is_sdk_version(name: str) -> bool:
    """Return True when ``name`` is a four-component dotted numeric version."""
    return SDK_VERSION_PATTERN.fullmatch(name) is not None


def to_version(version: str) -> Version:
    """Parse ``version`` into a comparable ``Version``.

    Raises:
        ValueError: If ``version`` is not a valid version string
    """
    try:
        return Version(version.strip())
    except InvalidVersion as exc:
        raise ValueError(f"Not a dotted numeric version: {version!r}") from exc


def parse_version(version: str) -> tuple[int, ...]:
    """Split ``version`` into integer release components."""
    return to_version(version).release


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as ``left`` is lower, equal or higher than ``right``."""
    a, b = to_version(left), to_version(right)
    if a == b:
        return 0
    return -1 if a < b else 1


def version_at_least(version: str, minimum: str) -> bool:
    """Inclusive lower-bound check: ``version >= minimum``."""
    return to_version(version) >= to_version(minimum)


def sort_versions_descending(versions: Iterable[str]) -> list[str]:
    """Order versions highest first."""
    return sorted(versions, key=to_version, reverse=True)
