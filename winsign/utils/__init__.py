"""Utility modules for common operations."""

from winsign.utils.crypto import decode_base64, load_or_create_hmac_key, write_secure_file
from winsign.utils.hashing import compute_sha256, compute_sha256_file
from winsign.utils.jsonl import atomic_write_jsonl
from winsign.utils.sanitize import format_command, mask_arguments
from winsign.utils.versions import (
    compare_versions,
    is_sdk_version,
    parse_version,
    sort_versions_descending,
    version_at_least,
)

__all__ = [
    "atomic_write_jsonl",
    "compare_versions",
    "compute_sha256",
    "compute_sha256_file",
    "decode_base64",
    "format_command",
    "is_sdk_version",
    "load_or_create_hmac_key",
    "mask_arguments",
    "parse_version",
    "sort_versions_descending",
    "version_at_least",
    "write_secure_file",
]
