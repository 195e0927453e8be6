"""Tests for certificate staging and certutil import."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from winsign.app.adapters import CertutilCertificateStore
from winsign.errors import CertificateStagingError


@pytest.fixture
def store(temp_dir: Path, runner) -> CertutilCertificateStore:
    return CertutilCertificateStore(temp_dir / "certificate.pfx", runner=runner)


def test_stage_writes_decoded_bytes(store, pfx_base64: str, pfx_bytes: bytes):
    path = store.stage(pfx_base64)

    assert path == store.cert_path
    assert path.read_bytes() == pfx_bytes


def test_stage_tolerates_wrapped_base64(store, pfx_base64: str, pfx_bytes: bytes):
    wrapped = "\n".join(pfx_base64[i : i + 8] for i in range(0, len(pfx_base64), 8))

    store.stage(f"  {wrapped}\r\n")

    assert store.cert_path.read_bytes() == pfx_bytes


def test_stage_overwrites_previous_certificate(store, pfx_base64: str, pfx_bytes: bytes):
    store.cert_path.write_bytes(b"stale contents that are longer than the new payload" * 4)

    store.stage(pfx_base64)

    assert store.cert_path.read_bytes() == pfx_bytes


def test_stage_rejects_invalid_base64(store, runner):
    with pytest.raises(CertificateStagingError):
        store.stage("this is not base64!")

    assert not store.cert_path.exists()
    assert runner.calls == []


def test_stage_into_directory_raises_os_error(temp_dir: Path, runner, pfx_base64: str):
    blocked = temp_dir / "blocked"
    blocked.mkdir()
    store = CertutilCertificateStore(blocked, runner=runner)

    with pytest.raises(OSError):
        store.stage(pfx_base64)


def test_import_runs_certutil(store, runner):
    assert store.import_pfx(store.cert_path, "hunter2") is True

    assert runner.calls == [
        ["certutil", "-f", "-p", "hunter2", "-importpfx", str(store.cert_path)]
    ]


def test_import_failure_returns_false_and_masks_password(
    store, runner, caplog: pytest.LogCaptureFixture
):
    runner.fail("import", stderr="CertUtil: The specified network password is not correct.")

    with caplog.at_level(logging.INFO):
        assert store.import_pfx(store.cert_path, "hunter2") is False

    assert "network password is not correct" in caplog.text
    assert "***" in caplog.text
    assert "hunter2" not in caplog.text


def test_cleanup_removes_staged_file_and_is_idempotent(store, pfx_base64: str):
    store.stage(pfx_base64)

    store.cleanup()
    store.cleanup()

    assert not store.cert_path.exists()


def test_stage_accepts_urlsafe_alphabet(store):
    store.stage("-_-_")

    assert store.cert_path.read_bytes() == b"\xfb\xff\xbf"


def test_stage_accepts_unpadded_base64(store):
    store.stage("YWJjZA")

    assert store.cert_path.read_bytes() == b"abcd"
