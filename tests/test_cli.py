"""CLI integration smoke tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import winsign.cli as cli_module
from winsign import __version__
from winsign.bootstrap import bootstrap_application
from winsign.cli import app

cli = CliRunner()


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch, runner, locator, sleeps):
    """Route CLI bootstrapping through recorded commands and a fixed signtool."""

    def wired(settings=None, **kwargs):
        return bootstrap_application(
            settings, command_runner=runner, locator=locator, sleep=sleeps.append
        )

    monkeypatch.setattr(cli_module, "bootstrap_application", wired)
    return runner


def test_version_flag():
    result = cli.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"winsign version {__version__}" in result.output


def test_run_signs_folder(override_settings, fake_tools, artifacts_dir: Path, temp_dir: Path):
    (artifacts_dir / "app.exe").write_bytes(b"MZ")
    report = temp_dir / "run.jsonl"

    result = cli.invoke(app, ["run", "--report", str(report)])

    assert result.exit_code == 0, result.output
    assert "[completed] import_certificate" in result.output
    assert "[completed] sign" in result.output
    assert f"signed: {artifacts_dir / 'app.exe'}" in result.output
    assert "NOTE: 1 signed, 0 skipped, 0 failed" in result.output
    assert fake_tools.kinds() == ["import", "sign", "verify"]

    summary = json.loads(report.read_text(encoding="utf-8").splitlines()[0])
    assert summary["signed"] == 1


def test_run_options_override_settings(override_settings, fake_tools, temp_dir: Path):
    other = temp_dir / "other"
    (other / "nested").mkdir(parents=True)
    (other / "nested" / "lib.dll").write_bytes(b"MZ")

    result = cli.invoke(
        app,
        [
            "run",
            str(other),
            "--recursive",
            "--cert-sha1",
            "CAFEBABE",
            "--cert-description",
            "Nightly",
            "--timestamp-server",
            "http://ts.example",
        ],
    )

    assert result.exit_code == 0, result.output
    sign_call = fake_tools.calls_of("sign")[0]
    assert sign_call[sign_call.index("/sha1") + 1] == "CAFEBABE"
    assert sign_call[sign_call.index("/d") + 1] == "Nightly"
    assert sign_call[sign_call.index("/t") + 1] == "http://ts.example"
    assert sign_call[-1] == str(other / "nested" / "lib.dll")


def test_run_import_failure_exits_nonzero(override_settings, fake_tools):
    fake_tools.fail("import")

    result = cli.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "code Signing failed" in result.output
    assert fake_tools.kinds() == ["import"]


def test_run_file_failure_only_warns(override_settings, fake_tools, artifacts_dir: Path):
    (artifacts_dir / "app.exe").write_bytes(b"MZ")
    fake_tools.fail("sign")

    result = cli.invoke(app, ["run"])

    assert result.exit_code == 0, result.output
    assert "failed_after_retries" in result.output
    assert "1 file(s) could not be signed" in result.output


def test_files_lists_candidates(override_settings, artifacts_dir: Path):
    (artifacts_dir / "app.exe").write_bytes(b"MZ")
    (artifacts_dir / "tool.nupkg").write_bytes(b"PK")
    (artifacts_dir / "notes.txt").write_text("x")

    result = cli.invoke(app, ["files", str(artifacts_dir)])

    assert result.exit_code == 0, result.output
    assert str(artifacts_dir / "app.exe") in result.output
    assert "tool.nupkg  (not signed: unsupported by signtool)" in result.output
    assert "notes.txt" not in result.output
    assert "Found 2 files" in result.output


def test_files_missing_folder(override_settings, temp_dir: Path):
    result = cli.invoke(app, ["files", str(temp_dir / "missing")])

    assert result.exit_code == 1
    assert "Folder not found" in result.output


def test_locate_reports_highest_sdk(override_settings, temp_dir: Path):
    base = temp_dir / "kits"
    tool = base / "10.0.26100.0" / "x86" / "signtool.exe"
    tool.parent.mkdir(parents=True)
    tool.write_bytes(b"MZ")

    result = cli.invoke(app, ["locate", "--base-dir", str(base)])

    assert result.exit_code == 0, result.output
    assert f"path: {tool}" in result.output
    assert "version: 10.0.26100.0" in result.output


def test_audit_show_and_verify(override_settings, fake_tools, artifacts_dir: Path):
    (artifacts_dir / "app.exe").write_bytes(b"MZ")
    assert cli.invoke(app, ["run", "--audit"]).exit_code == 0

    shown = cli.invoke(app, ["audit", "show"])
    assert shown.exit_code == 0, shown.output
    assert "sign.run" in shown.output
    assert '"signed": 1' in shown.output

    verified = cli.invoke(app, ["audit", "verify"])
    assert verified.exit_code == 0, verified.output
    assert "Audit ledger verified" in verified.output


def test_audit_show_empty(override_settings):
    result = cli.invoke(app, ["audit", "show"])

    assert result.exit_code == 0
    assert "No audit entries recorded." in result.output


def test_run_without_audit_writes_no_ledger(
    override_settings, fake_tools, artifacts_dir: Path, temp_dir: Path
):
    (artifacts_dir / "app.exe").write_bytes(b"MZ")

    result = cli.invoke(app, ["run"])

    assert result.exit_code == 0, result.output
    assert not (temp_dir / "appdata" / "audit.jsonl").exists()


def test_audit_show_filters_by_operation(override_settings, fake_tools, artifacts_dir: Path):
    assert cli.invoke(app, ["run", "--audit"]).exit_code == 0

    matched = cli.invoke(app, ["audit", "show", "--operation", "sign.run", "--json"])
    assert matched.exit_code == 0, matched.output
    assert json.loads(matched.output.splitlines()[0])["operation"] == "sign.run"

    other = cli.invoke(app, ["audit", "show", "--operation", "other"])
    assert "No audit entries recorded." in other.output


def test_audit_show_reports_corrupt_ledger(override_settings):
    ledger_path = override_settings.get_audit_path()
    ledger_path.write_text("not json\n", encoding="utf-8")

    result = cli.invoke(app, ["audit", "show"])

    assert result.exit_code == 1
    assert "Invalid entry at line 1" in result.output
