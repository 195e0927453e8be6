"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from winsign.app import ReportService, SigningContext, SigningPipeline, SigningService
from winsign.app.adapters import (
    CertutilCertificateStore,
    FileSystemDiscoveryAdapter,
    SubprocessCommandRunner,
    WindowsKitsLocator,
)
from winsign.app.ports import (
    CertificateStorePort,
    CommandRunnerPort,
    DiscoveryPort,
    LedgerPort,
    SigningToolLocatorPort,
)
from winsign.audit.ledger import AuditLedger
from winsign.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    pipeline: SigningPipeline
    signing_service: SigningService
    context: SigningContext
    locator: SigningToolLocatorPort
    discovery_port: DiscoveryPort
    certificate_store: CertificateStorePort
    command_runner: CommandRunnerPort
    ledger_port: LedgerPort
    report_service: ReportService


class NoOpLedger:
    """Ledger implementation that drops all writes."""

    def log(self, *args: Any, **kwargs: Any) -> None:
        return None

    def read_all(self) -> list[Any]:
        return []

    def verify(self) -> tuple[bool, str | None]:
        return (True, None)


def _create_ledger(settings: Settings) -> LedgerPort:
    if not settings.audit_enabled:
        return NoOpLedger()
    return AuditLedger(settings.get_audit_path())


def bootstrap_application(
    settings: Settings | None = None,
    *,
    command_runner: CommandRunnerPort | None = None,
    locator: SigningToolLocatorPort | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ApplicationContainer:
    """Create the application container with default adapters.

    ``command_runner``, ``locator`` and ``sleep`` may be overridden so tests
    can run the whole pipeline without signtool or certutil installed.
    """
    active_settings = settings or get_settings()

    runner = command_runner or SubprocessCommandRunner(
        timeout_seconds=active_settings.command_timeout_seconds
    )
    tool_locator = locator or WindowsKitsLocator(active_settings.signtool_base_dir)
    context = SigningContext(tool_locator)
    discovery = FileSystemDiscoveryAdapter()
    certificate_store = CertutilCertificateStore(active_settings.get_cert_path(), runner=runner)
    ledger = _create_ledger(active_settings)

    signing_service = SigningService(
        settings=active_settings,
        context=context,
        runner=runner,
        sleep=sleep,
    )
    pipeline = SigningPipeline(
        settings=active_settings,
        context=context,
        certificate_store=certificate_store,
        discovery_port=discovery,
        signing_service=signing_service,
        ledger_port=ledger,
    )

    return ApplicationContainer(
        settings=active_settings,
        pipeline=pipeline,
        signing_service=signing_service,
        context=context,
        locator=tool_locator,
        discovery_port=discovery,
        certificate_store=certificate_store,
        command_runner=runner,
        ledger_port=ledger,
        report_service=ReportService(),
    )
