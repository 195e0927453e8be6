"""Hashing utilities for audit records."""

import hashlib
from pathlib import Path


def compute_sha256(content: bytes) -> str:
    """Compute SHA-256 hex digest of ``content``."""
    return hashlib.sha256(content).hexdigest()


def compute_sha256_file(file_path: Path, chunk_size: int = 65536) -> str:
    """Compute SHA-256 hex digest of a file, reading it in chunks.

    Raises:
        FileNotFoundError: If file does not exist
        PermissionError: If file cannot be read
    """
    sha256 = hashlib.sha256()

    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)

    return sha256.hexdigest()
