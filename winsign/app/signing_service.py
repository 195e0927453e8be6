"""Sign-and-verify orchestration for individual files."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from winsign.app.ports import (
    CommandRunnerPort,
    FileSigningResult,
    SigningOutcome,
    SigningRequest,
    SigningToolInfo,
)
from winsign.app.signing_context import SigningContext
from winsign.config import Settings
from winsign.discovery.walk import is_signable
from winsign.errors import CommandError
from winsign.utils.versions import version_at_least

logger = logging.getLogger(__name__)

# SDK 10.0.26100.0 and later refuse to sign without an explicit /fd.
FILE_DIGEST_MIN_VERSION = "10.0.26100.0"
FILE_DIGEST_ALGORITHM = "sha1"


def build_sign_arguments(tool: SigningToolInfo, request: SigningRequest) -> list[str]:
    """Return the full ``signtool sign`` argv for ``request``."""
    args = [
        tool.path,
        "sign",
        "/sm",
        "/t",
        request.timestamp_server_url,
        "/sha1",
        request.certificate_thumbprint,
    ]
    if request.description:
        args.extend(["/d", request.description])
    if version_at_least(tool.version, FILE_DIGEST_MIN_VERSION):
        args.extend(["/fd", FILE_DIGEST_ALGORITHM])
    args.append(str(request.file_path))
    return args


def build_verify_arguments(tool: SigningToolInfo, file_path: Path) -> list[str]:
    return [tool.path, "verify", "/pa", str(file_path)]


class SigningService:
    """Sign one file at a time with bounded, linearly backed-off retries.

    Attempt ``n`` (zero-based) waits ``n * backoff_seconds`` first, so the
    first attempt runs immediately. A signing attempt that succeeds is
    followed by ``signtool verify /pa``.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        context: SigningContext,
        runner: CommandRunnerPort,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._context = context
        self._runner = runner
        self._sleep = sleep

    def build_request(self, file_path: Path) -> SigningRequest:
        return SigningRequest(
            file_path=file_path,
            certificate_thumbprint=self._settings.cert_sha1 or "",
            timestamp_server_url=self._settings.timestamp_server,
            description=self._settings.cert_description or None,
        )

    def try_sign(self, file_path: Path) -> FileSigningResult:
        """Sign ``file_path`` and report what happened.

        Unsupported extensions are skipped without running any command.
        """
        if not is_signable(file_path):
            logger.info("skipping unsupported file type: %s", file_path)
            return FileSigningResult(
                path=file_path, outcome=SigningOutcome.SKIPPED_UNSUPPORTED_TYPE
            )

        tool = self._context.tool_info()
        request = self.build_request(file_path)
        max_attempts = self._settings.max_attempts

        for attempt in range(max_attempts):
            self._wait(attempt)
            if self._attempt(tool, request, attempt + 1):
                return FileSigningResult(
                    path=file_path, outcome=SigningOutcome.SIGNED, attempts=attempt + 1
                )

        logger.error("giving up on %s after %d attempts", file_path, max_attempts)
        return FileSigningResult(
            path=file_path,
            outcome=SigningOutcome.FAILED_AFTER_RETRIES,
            attempts=max_attempts,
        )

    def _wait(self, attempt: int) -> None:
        delay = attempt * self._settings.backoff_seconds
        if delay > 0:
            logger.info("waiting for %s seconds.", delay)
            self._sleep(delay)

    def _attempt(self, tool: SigningToolInfo, request: SigningRequest, number: int) -> bool:
        args = build_sign_arguments(tool, request)
        try:
            result = self._runner.run(args)
        except CommandError as exc:
            logger.error(
                "signing attempt %d/%d failed for %s: %s",
                number,
                self._settings.max_attempts,
                request.file_path,
                exc,
            )
            if exc.stderr:
                logger.error(exc.stderr)
            return False

        logger.info("signed file: %s\nCommand: %s", request.file_path, result.command)
        if result.stdout:
            logger.info(result.stdout)
        return self._verify(tool, request.file_path)

    def _verify(self, tool: SigningToolInfo, file_path: Path) -> bool:
        try:
            result = self._runner.run(build_verify_arguments(tool, file_path))
        except CommandError as exc:
            logger.warning("signature verification failed for %s: %s", file_path, exc)
            for stream in (exc.stdout, exc.stderr):
                if stream:
                    logger.warning(stream)
            return not self._settings.verify_failure_is_error

        logger.info("verified signature for file: %s", file_path)
        if result.stdout:
            logger.info(result.stdout)
        return True
