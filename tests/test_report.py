"""Tests for typesift.report."""

from __future__ import annotations

import json
from pathlib import Path

from typesift.models import (
    MODULE_COMPLETED,
    MODULE_FAILED,
    ModuleFile,
    ModuleOutcome,
    ProcessingReport,
    RunSummary,
    TypeFailure,
)
from typesift.report import write_run_report


def test_write_run_report_serialises_totals_and_failures(tmp_path: Path) -> None:
    report = ProcessingReport(module="Facepunch.Core", processed=3, skipped_generated=2)
    report.failed.append(TypeFailure(full_name="Game.Broken", error="boom", kind="decompile"))
    summary = RunSummary(
        modules=[
            ModuleOutcome(
                module=ModuleFile.from_path(tmp_path / "Facepunch.Core.dll"),
                status=MODULE_COMPLETED,
                report=report,
            ),
            ModuleOutcome(
                module=ModuleFile.from_path(tmp_path / "Oxide.Core.dll"),
                status=MODULE_FAILED,
                error="bad image",
            ),
        ]
    )

    target = write_run_report(summary, tmp_path / "reports" / "run.json")
    payload = json.loads(target.read_text(encoding="utf-8"))

    assert payload["version"] == 1
    assert payload["totals"] == {
        "modules": 2,
        "skipped_modules": 0,
        "failed_modules": 1,
        "processed": 3,
        "skipped_generated": 2,
        "failed_types": 1,
    }
    assert payload["modules"][0]["report"]["failed"] == [
        {"type": "Game.Broken", "kind": "decompile", "error": "boom"}
    ]
    assert payload["modules"][1]["error"] == "bad image"
