"""winsign CLI application with Typer."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer

from winsign import __version__
from winsign.audit.ledger import AuditLedger
from winsign.bootstrap import bootstrap_application
from winsign.config import get_settings, set_settings
from winsign.discovery.walk import is_signable

app = typer.Typer(
    name="winsign",
    help="Sign Windows artifacts with signtool as a build pipeline step",
    add_completion=False,
    no_args_is_help=True,
)
audit_app = typer.Typer(help="Audit ledger inspection")
app.add_typer(audit_app, name="audit")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"winsign version {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    ] = None,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Override data directory (audit ledger)"),
    ] = None,
) -> None:
    """winsign - Authenticode signing for CI pipelines."""
    settings = get_settings()
    if log_level:
        settings.log_level = log_level
    if data_dir:
        settings.data_dir = data_dir
    set_settings(settings)
    _configure_logging(settings.log_level)


@app.command("run")
def run(
    folder: Annotated[
        Path | None,
        typer.Argument(help="Folder containing files to sign (defaults to the folder input)"),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recursively search for supported files"),
    ] = False,
    cert_sha1: Annotated[
        str | None,
        typer.Option("--cert-sha1", help="Certificate SHA-1 thumbprint"),
    ] = None,
    cert_description: Annotated[
        str | None,
        typer.Option("--cert-description", help="Description added to signed files"),
    ] = None,
    timestamp_server: Annotated[
        str | None,
        typer.Option("--timestamp-server", help="Timestamp server URL"),
    ] = None,
    best_effort: Annotated[
        bool,
        typer.Option(
            "--best-effort",
            help="Log missing inputs and continue instead of aborting.",
        ),
    ] = False,
    verify_strict: Annotated[
        bool,
        typer.Option(
            "--verify-strict",
            help="Retry a file when 'signtool verify' rejects the new signature.",
        ),
    ] = False,
    report: Annotated[
        Path | None,
        typer.Option("--report", help="Write a JSONL run report to this path"),
    ] = None,
    audit: Annotated[
        bool,
        typer.Option("--audit", help="Record this run in the audit ledger"),
    ] = False,
) -> None:
    """Stage the certificate, import it, and sign every supported file.

    The certificate and its password are read from WINSIGN_CERTIFICATE /
    WINSIGN_CERT_PASSWORD (or INPUT_CERTIFICATE / INPUT_CERT-PASSWORD) so they
    never appear on the command line.
    """
    overrides: dict[str, Any] = {}
    if folder is not None:
        overrides["folder"] = folder
    if recursive:
        overrides["recursive"] = True
    if cert_sha1 is not None:
        overrides["cert_sha1"] = cert_sha1
    if cert_description is not None:
        overrides["cert_description"] = cert_description
    if timestamp_server is not None:
        overrides["timestamp_server"] = timestamp_server
    if best_effort:
        overrides["strict_validation"] = False
    if verify_strict:
        overrides["verify_failure_is_error"] = True
    if audit:
        overrides["audit_enabled"] = True

    settings = get_settings().model_copy(update=overrides)
    container = bootstrap_application(settings)

    typer.secho(f"Signing files in {settings.folder or '<unset>'}...", fg=typer.colors.BLUE)
    result = container.pipeline.run()

    for stage in result.stages:
        color = typer.colors.GREEN if stage.status == "completed" else typer.colors.YELLOW
        typer.secho(f"[{stage.status}] {stage.name}", fg=color)

    for item in result.files:
        typer.echo(f"{item.outcome.value}: {item.path}")

    for note in result.notes:
        typer.secho(f"NOTE: {note}", fg=typer.colors.YELLOW)

    if report is not None:
        container.report_service.write_run_report(report.resolve(), result)
        typer.secho(f"Run report written to {report}", fg=typer.colors.BLUE)

    if result.failed:
        typer.secho(result.failure_message or "code Signing failed", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if result.failed_count:
        typer.secho(
            f"Warning: {result.failed_count} file(s) could not be signed",
            fg=typer.colors.YELLOW,
            err=True,
        )


@app.command("locate")
def locate(
    base_dir: Annotated[
        Path | None,
        typer.Option("--base-dir", help="Windows Kits bin directory to search"),
    ] = None,
) -> None:
    """Show which signtool binary and SDK version would be used."""
    settings = get_settings()
    if base_dir is not None:
        settings = settings.model_copy(update={"signtool_base_dir": base_dir})
    container = bootstrap_application(settings)
    info = container.context.tool_info()
    typer.echo(f"path: {info.path}")
    typer.echo(f"version: {info.version}")


@app.command("files")
def files(
    folder: Annotated[Path, typer.Argument(help="Folder to scan")],
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recursively scan directories"),
    ] = False,
) -> None:
    """List the files a signing run would visit, without signing anything."""
    if not folder.is_dir():
        typer.secho(f"Error: Folder not found: {folder}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    container = bootstrap_application()
    count = 0
    for path in container.discovery_port.discover(folder, recursive=recursive):
        marker = "" if is_signable(path) else "  (not signed: unsupported by signtool)"
        typer.echo(f"{path}{marker}")
        count += 1
    typer.secho(f"Found {count} files", fg=typer.colors.GREEN)


@audit_app.command("show")
def audit_show(
    operation: Annotated[
        str | None,
        typer.Option("--operation", help="Only show entries for this operation"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Emit raw JSON lines"),
    ] = False,
) -> None:
    """Print audit ledger entries."""
    ledger = AuditLedger(get_settings().get_audit_path())
    try:
        entries = ledger.get_by_operation(operation) if operation else ledger.read_all()
    except ValueError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if not entries:
        typer.echo("No audit entries recorded.")
        return

    for entry in entries:
        if as_json:
            typer.echo(entry.model_dump_json())
            continue
        args = entry.args or {}
        summary = json.dumps(
            {key: args.get(key) for key in ("signed", "skipped", "failed") if key in args}
        )
        typer.echo(f"#{entry.sequence} {entry.timestamp} {entry.operation} {summary}")


@audit_app.command("verify")
def audit_verify() -> None:
    """Verify the audit ledger hash chain."""
    valid, error = AuditLedger(get_settings().get_audit_path()).verify()
    if valid:
        typer.secho("Audit ledger verified", fg=typer.colors.GREEN)
        return
    typer.secho(f"Audit ledger integrity failed: {error}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
