"""Discovery port interface for signable file enumeration."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol


class DiscoveryPort(Protocol):
    """Port interface for streaming discovery of candidate files."""

    def discover(self, root: Path, *, recursive: bool = False) -> Iterator[Path]:
        """Yield candidate file paths under ``root`` as they are found.

        Listing or stat failures propagate and end the iteration.
        """
        ...
