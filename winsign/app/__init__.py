"""Application layer for winsign.

Services orchestrate signing without touching the host directly; process
execution, filesystem discovery, and the certificate store are reached
through port interfaces.
"""

__all__ = [
    "ReportService",
    "SigningContext",
    "SigningPipeline",
    "SigningRunResult",
    "SigningService",
]

from winsign.app.report_service import ReportService
from winsign.app.signing_context import SigningContext
from winsign.app.signing_pipeline import SigningPipeline, SigningRunResult
from winsign.app.signing_service import SigningService
