"""Signable file discovery."""

from winsign.discovery.walk import (
    DISCOVERABLE_EXTENSIONS,
    PACKAGE_EXTENSIONS,
    SIGNABLE_EXTENSIONS,
    is_signable,
    iter_signable_files,
)

__all__ = [
    "DISCOVERABLE_EXTENSIONS",
    "PACKAGE_EXTENSIONS",
    "SIGNABLE_EXTENSIONS",
    "is_signable",
    "iter_signable_files",
]
