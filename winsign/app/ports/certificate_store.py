"""Certificate store port interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class CertificateStorePort(Protocol):
    """Port interface for staging a PFX and importing it into the trust store.

    Side effects: Writes the staged certificate file, mutates the machine store.
    """

    def stage(self, encoded_certificate: str) -> Path:
        """Decode a base64 certificate to the staging path.

        Raises:
            CertificateStagingError: If the value is not valid base64
            OSError: If the file cannot be written
        """
        ...

    def import_pfx(self, cert_path: Path, password: str) -> bool:
        """Import the staged PFX; return False (after logging) on failure."""
        ...

    def cleanup(self) -> None:
        """Remove the staged certificate if present."""
        ...
