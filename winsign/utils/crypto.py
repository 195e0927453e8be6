"""Key handling and certificate decoding helpers."""

from __future__ import annotations

import base64
import binascii
import os
import secrets
from pathlib import Path


def write_secure_file(path: Path, data: bytes, *, mode: int = 0o600) -> None:
    """Write ``data`` to ``path`` with owner-only permissions.

    Args:
        path: Target file path
        data: Bytes to persist
        mode: File mode to apply (POSIX style)

    Raises:
        OSError: If the file cannot be created or written
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        os.write(fd, data)
    finally:
        os.close(fd)

    try:
        os.chmod(path, mode)
    except PermissionError:
        # Windows may not support POSIX-style chmod; best effort only.
        pass


def load_or_create_hmac_key(path: Path, *, length: int = 32) -> bytes:
    """Load an existing HMAC key or generate a new random key."""
    try:
        return path.read_bytes()
    except FileNotFoundError:
        key = secrets.token_bytes(length)
        path.parent.mkdir(parents=True, exist_ok=True)
        write_secure_file(path, key)
        return key


_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def decode_base64(encoded: str) -> bytes:
    """Decode a base64 blob the way lenient decoders do.

    Line breaks, surrounding whitespace and missing ``=`` padding are
    tolerated, and the URL-safe alphabet (``-``/``_``) is accepted.

    Raises:
        ValueError: If ``encoded`` is empty or not valid base64
    """
    compact = "".join(encoded.split()).translate(_URLSAFE_TO_STANDARD)
    if not compact:
        raise ValueError("Encoded value is empty")
    unpadded = compact.rstrip("=")
    compact = unpadded + "=" * (-len(unpadded) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 data: {exc}") from exc
