"""Discovery adapter backed by the local filesystem walker."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from winsign.app.ports import DiscoveryPort
from winsign.discovery.walk import iter_signable_files


class FileSystemDiscoveryAdapter(DiscoveryPort):
    """Adapter that streams candidate paths via ``iter_signable_files``."""

    def discover(self, root: Path, *, recursive: bool = False) -> Iterator[Path]:
        yield from iter_signable_files(root, recursive=recursive)
