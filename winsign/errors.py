"""Exception hierarchy shared by the signing pipeline."""

from __future__ import annotations

from collections.abc import Sequence


class WinsignError(Exception):
    """Base class for all winsign failures."""

    pass


class ConfigurationError(WinsignError):
    """Raised when required pipeline inputs are missing."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        names = ", ".join(self.missing)
        super().__init__(f"Missing required input(s): {names}")


class CertificateStagingError(WinsignError):
    """Raised when the encoded certificate cannot be decoded for staging."""

    pass


class CertificateImportError(WinsignError):
    """Raised when the staged certificate could not be added to the store."""

    pass


class CommandError(WinsignError):
    """Raised when an external command exits non-zero or cannot be spawned.

    ``command`` is the display form of the invocation with secrets masked.
    """

    def __init__(
        self,
        command: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if reason is None:
            reason = f"exit code {returncode}"
        super().__init__(f"Command failed ({reason}): {command}")
