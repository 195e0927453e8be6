"""Subprocess-backed command runner."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable, Sequence

from winsign.app.ports import CommandResult, CommandRunnerPort
from winsign.errors import CommandError
from winsign.utils.sanitize import format_command

logger = logging.getLogger(__name__)


def _as_text(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


class SubprocessCommandRunner(CommandRunnerPort):
    """Run commands with ``subprocess.run`` (no shell), capturing text output."""

    def __init__(self, *, timeout_seconds: float | None = None) -> None:
        self.timeout_seconds = timeout_seconds

    def run(self, args: Sequence[str], *, secrets: Iterable[str] = ()) -> CommandResult:
        argv = [str(arg) for arg in args]
        secrets = list(secrets)
        display = format_command(argv, secrets)
        logger.debug("executing: %s", display)

        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(
                display,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                reason=f"timed out after {self.timeout_seconds}s",
            ) from exc
        except OSError as exc:
            raise CommandError(display, stderr=str(exc), reason=f"could not start: {exc}") from exc

        if completed.returncode != 0:
            raise CommandError(
                display,
                returncode=completed.returncode,
                stdout=_as_text(completed.stdout),
                stderr=_as_text(completed.stderr),
            )

        return CommandResult(
            command=display,
            returncode=completed.returncode,
            stdout=_as_text(completed.stdout),
            stderr=_as_text(completed.stderr),
        )
