"""Concrete adapters wiring application ports to host tooling."""

from __future__ import annotations

from .certutil import CertutilCertificateStore
from .command import SubprocessCommandRunner
from .discovery import FileSystemDiscoveryAdapter
from .signtool_locator import FALLBACK_SIGNING_TOOL, WindowsKitsLocator

__all__ = [
    "CertutilCertificateStore",
    "FALLBACK_SIGNING_TOOL",
    "FileSystemDiscoveryAdapter",
    "SubprocessCommandRunner",
    "WindowsKitsLocator",
]
