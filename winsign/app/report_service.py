"""Run report generation for signing pipeline results."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from winsign import __version__
from winsign.app.signing_pipeline import SigningRunResult
from winsign.utils.jsonl import atomic_write_jsonl


class ReportService:
    """Serialize a ``SigningRunResult`` as a JSONL run report.

    The first line is a summary record; each following line describes one
    discovered file.
    """

    def build_summary(self, result: SigningRunResult) -> dict[str, Any]:
        return {
            "record": "summary",
            "producer": f"winsign-{__version__}",
            "produced_at": datetime.now(UTC).isoformat(),
            "tool_version": result.tool_version,
            "signed": result.signed_count,
            "skipped": result.skipped_count,
            "failed": result.failed_count,
            "pipeline_failed": result.failed,
            "failure_message": result.failure_message,
            "stages": [
                {"name": stage.name, "status": stage.status, "detail": stage.detail}
                for stage in result.stages
            ],
        }

    def write_run_report(self, path: Path, result: SigningRunResult) -> Path:
        records: list[dict[str, Any]] = [self.build_summary(result)]
        records.extend(
            {"record": "file", **item.model_dump(mode="json")} for item in result.files
        )
        atomic_write_jsonl(path, records)
        return path
