"""Append-only audit ledger recording every signing run."""

from __future__ import annotations

import hashlib
import hmac
import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from winsign import __version__
from winsign.utils.crypto import load_or_create_hmac_key
from winsign.utils.hashing import compute_sha256

GENESIS_HASH = "0" * 64


class AuditEntry(BaseModel):
    """Single ledger entry, linked to its predecessor by ``previous_hash``."""

    timestamp: str = Field(..., description="ISO 8601 timestamp in UTC")
    operation: str = Field(..., description="Operation name (e.g., sign.run)")
    inputs: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)
    args: dict[str, Any] = Field(default_factory=dict)
    versions: dict[str, str] = Field(default_factory=dict)
    previous_hash: str = GENESIS_HASH
    sequence: int = Field(..., ge=1)
    entry_hash: str | None = None
    signature: str | None = None

    def compute_hash(self) -> str:
        """SHA-256 over the canonical JSON body, excluding hash and signature."""
        body = self.model_dump(mode="json", exclude={"entry_hash", "signature"})
        canonical = json.dumps(body, sort_keys=True, separators=(",", ":"))
        return compute_sha256(canonical.encode("utf-8"))


class AuditLedger:
    """JSONL ledger with a SHA-256 hash chain sealed by per-entry HMACs.

    The HMAC key lives next to the ledger (``audit.key``) unless one is passed
    in explicitly. Nothing touches the filesystem until the ledger is first
    read or written.
    """

    def __init__(self, ledger_path: Path, *, hmac_key: bytes | None = None) -> None:
        self.ledger_path = ledger_path
        self._key = hmac_key
        self._tail: tuple[str, int] | None = None

    def _hmac_key(self) -> bytes:
        if self._key is None:
            self._key = load_or_create_hmac_key(self.ledger_path.with_suffix(".key"))
        return self._key

    def _load_tail(self) -> tuple[str, int]:
        """Return ``(last_hash, last_sequence)``, reading the ledger once."""
        if self._tail is None:
            entries = self.read_all()
            tail = entries[-1] if entries else None
            last_hash = tail.entry_hash if tail and tail.entry_hash else GENESIS_HASH
            self._tail = (last_hash, tail.sequence if tail else 0)
        return self._tail

    def _sign(self, entry: AuditEntry) -> str:
        payload = f"{entry.sequence}|{entry.previous_hash}|{entry.entry_hash}".encode("utf-8")
        return hmac.new(self._hmac_key(), payload, hashlib.sha256).hexdigest()

    def log(
        self,
        operation: str,
        inputs: list[str] | None = None,
        outputs: list[str] | None = None,
        args: dict[str, Any] | None = None,
        versions: dict[str, str] | None = None,
    ) -> AuditEntry:
        """Append an entry and fsync it before returning.

        Raises:
            ValueError: If the existing ledger cannot be parsed
            OSError: If the ledger or its key cannot be written
        """
        last_hash, last_sequence = self._load_tail()
        entry = AuditEntry(
            timestamp=datetime.now(UTC).isoformat(),
            operation=operation,
            inputs=inputs or [],
            outputs=outputs or [],
            args=args or {},
            versions={"winsign": __version__, **(versions or {})},
            previous_hash=last_hash,
            sequence=last_sequence + 1,
        )
        entry.entry_hash = entry.compute_hash()
        entry.signature = self._sign(entry)

        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.ledger_path, "a", encoding="utf-8") as fh:
            fh.write(entry.model_dump_json() + "\n")
            fh.flush()
            os.fsync(fh.fileno())

        self._tail = (entry.entry_hash, entry.sequence)
        return entry

    def read_all(self) -> list[AuditEntry]:
        """Return entries in chronological order.

        Raises:
            ValueError: If a line cannot be parsed
        """
        if not self.ledger_path.exists():
            return []

        entries: list[AuditEntry] = []
        with open(self.ledger_path, encoding="utf-8") as fh:
            for line_num, raw_line in enumerate(fh, 1):
                line = raw_line.strip()
                if not line:
                    continue
                try:
                    entries.append(AuditEntry.model_validate_json(line))
                except ValueError as exc:
                    raise ValueError(
                        f"Invalid entry at line {line_num} in {self.ledger_path}: {exc}"
                    ) from exc
        return entries

    def get_by_operation(self, operation: str) -> list[AuditEntry]:
        return [entry for entry in self.read_all() if entry.operation == operation]

    def verify(self) -> tuple[bool, str | None]:
        """Check hashes, chain links, sequence numbers, and HMAC seals."""
        try:
            entries = self.read_all()
        except ValueError as exc:
            return False, str(exc)

        previous_hash = GENESIS_HASH
        for idx, entry in enumerate(entries, 1):
            if entry.sequence != idx:
                return False, f"Entry {idx} sequence mismatch (found {entry.sequence})."
            if entry.previous_hash != previous_hash:
                return False, f"Entry {idx} breaks the hash chain."
            expected_hash = entry.compute_hash()
            if entry.entry_hash is None or not hmac.compare_digest(entry.entry_hash, expected_hash):
                return False, f"Entry {idx} has an invalid hash."
            if entry.signature is None or not hmac.compare_digest(entry.signature, self._sign(entry)):
                return False, f"Entry {idx} has an invalid signature; ledger may have been tampered."
            previous_hash = entry.entry_hash

        return True, None
