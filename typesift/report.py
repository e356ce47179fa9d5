"""Persisting a run summary as JSON next to the decompiled tree."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from .models import RunSummary

_REPORT_VERSION = 1


def write_run_report(summary: RunSummary, path: Path) -> Path:
    """Write ``summary`` to ``path`` and return the path written."""
    payload = {
        "version": _REPORT_VERSION,
        "generated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        **summary.to_dict(),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    return path


__all__ = ["write_run_report"]
