"""JSONL writing helpers with durability guarantees."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any


def _serialize(record: Any) -> str:
    if hasattr(record, "model_dump"):
        payload = record.model_dump(mode="json")
    elif isinstance(record, dict):
        payload = record
    else:
        raise TypeError(
            f"Unsupported record type for JSONL serialization: {type(record)!r}. "
            "Provide dict or Pydantic model."
        )
    return json.dumps(payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def atomic_write_jsonl(path: Path, records: Iterable[Any]) -> None:
    """Write ``records`` to ``path`` atomically as JSONL.

    Records go to a temporary sibling file that is fsynced and then moved into
    place with ``os.replace``, so readers never observe a partial report.
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=str(destination.parent),
        prefix=destination.name,
        suffix=".tmp",
        text=True,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            for record in records:
                handle.write(_serialize(record))
                handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, destination)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise
