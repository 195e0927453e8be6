"""Pytest configuration and fixtures."""

from __future__ import annotations

import base64
import os
from collections.abc import Callable, Generator, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from winsign.app.ports import CommandResult, SigningToolInfo
from winsign.config import Settings
from winsign.errors import CommandError
from winsign.utils.sanitize import format_command

PFX_BYTES = b"\x30\x82\x01\x0afake-pfx-payload-for-tests"
PFX_BASE64 = base64.b64encode(PFX_BYTES).decode("ascii")
CERT_PASSWORD = "hunter2"
CERT_SHA1 = "0123456789ABCDEF0123456789ABCDEF01234567"


def command_kind(argv: Sequence[str]) -> str:
    """Classify a recorded invocation as ``import``, ``sign`` or ``verify``."""
    if "-importpfx" in argv:
        return "import"
    return argv[1] if len(argv) > 1 else argv[0]


@dataclass
class _FailureRule:
    kind: str
    match: str | None
    remaining: int | None
    stderr: str


class RecordingCommandRunner:
    """Command runner double that records argv and fails on demand."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._rules: list[_FailureRule] = []

    def fail(
        self,
        kind: str,
        *,
        match: str | None = None,
        times: int | None = None,
        stderr: str = "SignTool Error: simulated failure",
    ) -> None:
        """Make ``kind`` commands fail ``times`` times (forever when None)."""
        self._rules.append(_FailureRule(kind=kind, match=match, remaining=times, stderr=stderr))

    def run(self, args: Sequence[str], *, secrets: Iterable[str] = ()) -> CommandResult:
        argv = [str(arg) for arg in args]
        self.calls.append(argv)
        display = format_command(argv, list(secrets))
        kind = command_kind(argv)

        for rule in self._rules:
            if rule.kind != kind or rule.remaining == 0:
                continue
            if rule.match is not None and not any(rule.match in arg for arg in argv):
                continue
            if rule.remaining is not None:
                rule.remaining -= 1
            raise CommandError(display, returncode=1, stdout="", stderr=rule.stderr)

        return CommandResult(command=display, returncode=0, stdout=f"{kind} ok")

    def calls_of(self, kind: str) -> list[list[str]]:
        return [call for call in self.calls if command_kind(call) == kind]

    def kinds(self) -> list[str]:
        return [command_kind(call) for call in self.calls]


class StaticLocator:
    """Locator double returning a fixed signtool and counting lookups."""

    def __init__(self, version: str = "10.0.17763.0") -> None:
        self.info = SigningToolInfo(
            path=f"C:/Program Files (x86)/Windows Kits/10/bin/{version}/x86/signtool.exe",
            version=version,
        )
        self.calls = 0

    def locate(self) -> SigningToolInfo:
        self.calls += 1
        return self.info


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Strip winsign/Actions inputs from the environment and reset global settings."""
    import winsign.config as config_module

    for name in list(os.environ):
        if name.upper().startswith(("WINSIGN_", "INPUT_")):
            monkeypatch.delenv(name, raising=False)

    original_settings = config_module._settings
    try:
        yield
    finally:
        config_module._settings = original_settings


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary working directory for a test."""
    return tmp_path


@pytest.fixture
def artifacts_dir(temp_dir: Path) -> Path:
    """Empty folder that tests fill with files to sign."""
    folder = temp_dir / "artifacts"
    folder.mkdir()
    return folder


@pytest.fixture
def runner() -> RecordingCommandRunner:
    return RecordingCommandRunner()


@pytest.fixture
def locator() -> StaticLocator:
    return StaticLocator()


@pytest.fixture
def make_locator() -> Callable[[str], StaticLocator]:
    return StaticLocator


@pytest.fixture
def pfx_bytes() -> bytes:
    return PFX_BYTES


@pytest.fixture
def pfx_base64() -> str:
    return PFX_BASE64


@pytest.fixture
def sleeps() -> list[float]:
    """Collects backoff delays; pass ``sleeps.append`` as the sleep callable."""
    return []


@pytest.fixture
def make_settings(temp_dir: Path) -> Callable[..., Settings]:
    """Build fully populated settings isolated to ``temp_dir``."""

    def factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "folder": temp_dir / "artifacts",
            "certificate": PFX_BASE64,
            "cert_password": CERT_PASSWORD,
            "cert_sha1": CERT_SHA1,
            "timestamp_server": "http://timestamp.example.test",
            "cert_path": temp_dir / "certificate.pfx",
            "data_dir": temp_dir / "appdata",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return factory


@pytest.fixture
def override_settings(make_settings: Callable[..., Settings]) -> Settings:
    """Install isolated settings as the global instance used by the CLI."""
    from winsign.config import set_settings

    settings = make_settings()
    set_settings(settings)
    return settings
