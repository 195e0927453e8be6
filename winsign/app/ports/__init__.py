"""Port interfaces for the winsign application layer.

Services depend on these protocols, never on concrete adapters.
"""

__all__ = [
    "CertificateStorePort",
    "CommandResult",
    "CommandRunnerPort",
    "DiscoveryPort",
    "FileSigningResult",
    "LedgerPort",
    "SigningOutcome",
    "SigningRequest",
    "SigningToolInfo",
    "SigningToolLocatorPort",
]

from winsign.app.ports.certificate_store import CertificateStorePort
from winsign.app.ports.command import CommandResult, CommandRunnerPort
from winsign.app.ports.discovery import DiscoveryPort
from winsign.app.ports.ledger import LedgerPort
from winsign.app.ports.signtool import (
    FileSigningResult,
    SigningOutcome,
    SigningRequest,
    SigningToolInfo,
    SigningToolLocatorPort,
)
