"""Lazy discovery of signable files under a directory tree."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

# Extensions signtool can embed an Authenticode signature into.
SIGNABLE_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".dll",
        ".exe",
        ".sys",
        ".vxd",
        ".msix",
        ".msixbundle",
        ".appx",
        ".appxbundle",
        ".msi",
        ".msp",
        ".msm",
        ".cab",
        ".ps1",
        ".psm1",
    }
)

# Discovered and reported, but never handed to signtool.
PACKAGE_EXTENSIONS: frozenset[str] = frozenset({".nupkg"})

DISCOVERABLE_EXTENSIONS: frozenset[str] = SIGNABLE_EXTENSIONS | PACKAGE_EXTENSIONS


def is_signable(path: Path | str) -> bool:
    """Return True if signtool can sign ``path`` (case-sensitive extension match)."""
    return Path(path).suffix in SIGNABLE_EXTENSIONS


def _list_entries(directory: Path) -> list[str]:
    return os.listdir(directory)


def iter_signable_files(root: Path, recursive: bool = False) -> Iterator[Path]:
    """Yield candidate files under ``root`` one at a time.

    Entries are visited in directory-listing order without sorting. With
    ``recursive`` set, subdirectories are walked depth-first at the point they
    appear in the listing; otherwise they are skipped.

    Args:
        root: Directory to scan
        recursive: Descend into subdirectories

    Yields:
        Paths whose extension is signable or a package extension

    Raises:
        OSError: If any directory cannot be listed or entry cannot be stat-ed
    """
    for name in _list_entries(root):
        full_path = root / name
        mode = full_path.stat().st_mode
        if stat.S_ISREG(mode):
            if full_path.suffix in DISCOVERABLE_EXTENSIONS:
                yield full_path
        elif stat.S_ISDIR(mode) and recursive:
            logger.debug("descending into %s", full_path)
            yield from iter_signable_files(full_path, recursive)
