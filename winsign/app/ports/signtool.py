"""Signing tool DTOs and the locator port."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class SigningToolInfo(BaseModel):
    """Location and SDK version of a signtool binary."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path to signtool.exe")
    version: str = Field(..., description="Dotted numeric SDK version, e.g. 10.0.26100.0")


class SigningRequest(BaseModel):
    """Everything needed to sign one file."""

    model_config = ConfigDict(frozen=True)

    file_path: Path
    certificate_thumbprint: str
    timestamp_server_url: str
    description: str | None = None


class SigningOutcome(StrEnum):
    SIGNED = "signed"
    SKIPPED_UNSUPPORTED_TYPE = "skipped_unsupported_type"
    FAILED_AFTER_RETRIES = "failed_after_retries"


class FileSigningResult(BaseModel):
    """Outcome of signing a single discovered file."""

    model_config = ConfigDict(frozen=True)

    path: Path
    outcome: SigningOutcome
    attempts: int = Field(0, ge=0, description="Signing invocations made for this file")


class SigningToolLocatorPort(Protocol):
    """Port interface for finding signtool on the host.

    ``locate`` must never raise; discovery problems resolve to a fallback.
    """

    def locate(self) -> SigningToolInfo:
        ...
