"""Signing pipeline: validate, stage, import, then sign every discovered file."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from winsign.app.ports import (
    CertificateStorePort,
    DiscoveryPort,
    FileSigningResult,
    LedgerPort,
    SigningOutcome,
)
from winsign.app.signing_context import SigningContext
from winsign.app.signing_service import SigningService
from winsign.config import Settings
from winsign.errors import CertificateImportError, ConfigurationError
from winsign.utils.hashing import compute_sha256_file

logger = logging.getLogger(__name__)

StageStatus = Literal["pending", "completed", "skipped", "failed"]

FAILURE_PREFIX = "code Signing failed"


@dataclass(slots=True)
class PipelineStage:
    """Represents the status of a pipeline phase."""

    name: str
    status: StageStatus = "pending"
    detail: str | None = None
    duration_seconds: float | None = None
    metrics: dict[str, Any] | None = None


class SigningRunResult(BaseModel):
    """Summary of a signing pipeline run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    files: list[FileSigningResult] = Field(default_factory=list)
    stages: list[PipelineStage] = Field(default_factory=list)
    tool_version: str | None = None
    failed: bool = False
    failure_message: str | None = None
    notes: list[str] = Field(default_factory=list)

    def count(self, outcome: SigningOutcome) -> int:
        return sum(1 for item in self.files if item.outcome == outcome)

    @property
    def signed_count(self) -> int:
        return self.count(SigningOutcome.SIGNED)

    @property
    def skipped_count(self) -> int:
        return self.count(SigningOutcome.SKIPPED_UNSUPPORTED_TYPE)

    @property
    def failed_count(self) -> int:
        return self.count(SigningOutcome.FAILED_AFTER_RETRIES)


class SigningPipeline:
    """Drive one signing run end to end.

    ``run`` never raises: any exception from a stage ends the run and is
    reported once through ``SigningRunResult.failure_message``. Later stages
    are marked skipped.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        context: SigningContext,
        certificate_store: CertificateStorePort,
        discovery_port: DiscoveryPort,
        signing_service: SigningService,
        ledger_port: LedgerPort | None = None,
    ) -> None:
        self._settings = settings
        self.context = context
        self._store = certificate_store
        self._discovery = discovery_port
        self._signer = signing_service
        self._ledger = ledger_port

    @contextmanager
    def _stage(self, stages: list[PipelineStage], name: str) -> Iterator[PipelineStage]:
        """Record timing and status for a pipeline phase."""
        stage = PipelineStage(name=name)
        stages.append(stage)
        start_time = time.monotonic()
        try:
            yield stage
        except Exception as exc:
            stage.status = "failed"
            stage.detail = str(exc)
            raise
        else:
            if stage.status == "pending":
                stage.status = "completed"
        finally:
            stage.duration_seconds = time.monotonic() - start_time

    def run(self) -> SigningRunResult:
        """Execute validate -> stage -> import -> sign -> cleanup."""
        result = SigningRunResult()
        staged = False

        try:
            self._run_validation(result.stages)
            # A failed write can leave a partial file behind.
            staged = True
            cert_path = self._run_staging(result.stages)
            self._run_import(result.stages, cert_path)
            self._run_signing(result)
        except Exception as exc:
            result.failed = True
            result.failure_message = f"{FAILURE_PREFIX}\nError: {exc}"
            logger.error(result.failure_message)
        finally:
            if staged:
                self._run_cleanup(result.stages)

        self._mark_unreached(result.stages)
        result.notes.append(
            f"{result.signed_count} signed, {result.skipped_count} skipped, "
            f"{result.failed_count} failed"
        )
        self._log_audit(result)
        return result

    # ------------------------------------------------------------------#
    # Stages
    # ------------------------------------------------------------------#

    def _run_validation(self, stages: list[PipelineStage]) -> None:
        with self._stage(stages, "validate") as stage:
            missing = self._settings.missing_inputs()
            for name in missing:
                logger.error("%s input must have a value.", name)
            if not missing:
                return
            if self._settings.strict_validation:
                raise ConfigurationError(missing)
            stage.detail = f"continuing without: {', '.join(missing)}"

    def _run_staging(self, stages: list[PipelineStage]) -> Path:
        with self._stage(stages, "stage_certificate") as stage:
            cert_path = self._store.stage(self._settings.get_certificate())
            stage.detail = str(cert_path)
            return cert_path

    def _run_import(self, stages: list[PipelineStage], cert_path: Path) -> None:
        with self._stage(stages, "import_certificate"):
            if not self._store.import_pfx(cert_path, self._settings.get_cert_password()):
                raise CertificateImportError(
                    f"could not import {cert_path} into the certificate store"
                )

    def _run_signing(self, result: SigningRunResult) -> None:
        folder = self._settings.folder
        with self._stage(result.stages, "sign") as stage:
            # Never fall back to the working directory.
            if folder is None:
                raise ConfigurationError(["folder"])
            for file_path in self._discovery.discover(folder, recursive=self._settings.recursive):
                outcome = self._signer.try_sign(file_path)
                result.files.append(outcome)
                if result.tool_version is None and outcome.attempts:
                    result.tool_version = self.context.tool_info().version
            stage.metrics = {
                "signed": result.signed_count,
                "skipped": result.skipped_count,
                "failed": result.failed_count,
            }

    def _run_cleanup(self, stages: list[PipelineStage]) -> None:
        with self._stage(stages, "cleanup") as stage:
            try:
                self._store.cleanup()
            except OSError as exc:
                logger.warning("could not remove staged certificate: %s", exc)
                stage.status = "failed"
                stage.detail = str(exc)

    # ------------------------------------------------------------------#
    # Internal helpers
    # ------------------------------------------------------------------#

    @staticmethod
    def _mark_unreached(stages: list[PipelineStage]) -> None:
        reached = {stage.name for stage in stages}
        for name in ("validate", "stage_certificate", "import_certificate", "sign"):
            if name not in reached:
                stages.append(PipelineStage(name=name, status="skipped"))

    def _log_audit(self, result: SigningRunResult) -> None:
        if self._ledger is None:
            return

        digests: list[str] = []
        for item in result.files:
            if item.outcome != SigningOutcome.SIGNED:
                continue
            try:
                digests.append(compute_sha256_file(item.path))
            except OSError as exc:
                logger.warning("could not hash signed file %s: %s", item.path, exc)

        try:
            self._ledger.log(
                operation="sign.run",
                inputs=[str(self._settings.folder)] if self._settings.folder else [],
                outputs=digests,
                args={
                    "recursive": self._settings.recursive,
                    "cert_sha1": self._settings.cert_sha1,
                    "timestamp_server": self._settings.timestamp_server,
                    "signed": result.signed_count,
                    "skipped": result.skipped_count,
                    "failed": result.failed_count,
                    "files": [item.model_dump(mode="json") for item in result.files],
                    "failure": result.failure_message,
                },
                versions={"signtool": result.tool_version} if result.tool_version else None,
            )
        except (OSError, ValueError) as exc:
            logger.warning("could not write audit entry: %s", exc)
