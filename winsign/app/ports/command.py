"""Command runner port for external tool invocation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Captured result of a successful external command."""

    command: str = Field(..., description="Display form of the command with secrets masked")
    returncode: int = Field(0, description="Process exit status")
    stdout: str = Field("", description="Captured standard output")
    stderr: str = Field("", description="Captured standard error")


class CommandRunnerPort(Protocol):
    """Port interface for running external commands.

    Implementations must raise ``CommandError`` when the process exits with a
    non-zero status or cannot be started, carrying the captured streams.

    Side effects: Spawns processes (signtool, certutil).
    """

    def run(self, args: Sequence[str], *, secrets: Iterable[str] = ()) -> CommandResult:
        """Run ``args`` and capture its output.

        Args:
            args: Executable followed by its arguments
            secrets: Argument values to mask in logs and error messages

        Returns:
            Result of a zero-exit invocation
        """
        ...
