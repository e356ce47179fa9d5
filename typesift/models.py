"""Core data models shared across typesift components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

TYPE_WRITTEN = "written"
TYPE_SKIPPED_EMPTY = "skipped_empty"
TYPE_SKIPPED_GENERATED = "skipped_generated"
TYPE_FAILED = "failed"

MODULE_SKIPPED_UNIMPORTANT = "skipped_unimportant"
MODULE_COMPLETED = "completed"
MODULE_FAILED = "failed"


@dataclass(frozen=True)
class ModuleFile:
    """A compiled module discovered in the source directory."""

    base_name: str
    path: Path

    @classmethod
    def from_path(cls, path: Path) -> "ModuleFile":
        return cls(base_name=path.stem, path=path)


@dataclass(frozen=True)
class TypeDescriptor:
    """A type declared inside a module, as reported by the decompiler engine."""

    name: str
    full_name: str
    handle: Any


@dataclass(frozen=True)
class TypeFailure:
    """A single type that could not be decompiled or written."""

    full_name: str
    error: str
    kind: str


@dataclass(frozen=True)
class TypeOutcome:
    """Structured result for one type inside a module."""

    name: str
    full_name: str
    status: str
    path: Optional[Path] = None
    rule: Optional[str] = None
    failure: Optional[TypeFailure] = None


@dataclass
class ProcessingReport:
    """Per-module counters and outcomes."""

    module: str
    processed: int = 0
    skipped_generated: int = 0
    failed: List[TypeFailure] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    renamed: List[str] = field(default_factory=list)
    outcomes: List[TypeOutcome] = field(default_factory=list)

    def record(self, outcome: TypeOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status == TYPE_WRITTEN and outcome.path is not None:
            self.processed += 1
            self.written.append(outcome.path)
        elif outcome.status == TYPE_SKIPPED_GENERATED:
            self.skipped_generated += 1
        elif outcome.status == TYPE_FAILED and outcome.failure is not None:
            self.failed.append(outcome.failure)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module": self.module,
            "processed": self.processed,
            "skipped_generated": self.skipped_generated,
            "failed": [
                {"type": failure.full_name, "kind": failure.kind, "error": failure.error}
                for failure in self.failed
            ],
            "renamed": list(self.renamed),
        }


@dataclass
class ModuleOutcome:
    """Result of handling one discovered module."""

    module: ModuleFile
    status: str
    report: Optional[ProcessingReport] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "module": self.module.base_name,
            "path": str(self.module.path),
            "status": self.status,
        }
        if self.report is not None:
            data["report"] = self.report.to_dict()
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class RunSummary:
    """Aggregated outcomes of a full pipeline run."""

    modules: List[ModuleOutcome] = field(default_factory=list)

    @property
    def reports(self) -> List[ProcessingReport]:
        return [outcome.report for outcome in self.modules if outcome.report is not None]

    @property
    def processed(self) -> int:
        return sum(report.processed for report in self.reports)

    @property
    def skipped_generated(self) -> int:
        return sum(report.skipped_generated for report in self.reports)

    @property
    def failed_types(self) -> int:
        return sum(len(report.failed) for report in self.reports)

    @property
    def failed_modules(self) -> List[ModuleOutcome]:
        return [outcome for outcome in self.modules if outcome.status == MODULE_FAILED]

    @property
    def skipped_modules(self) -> List[ModuleOutcome]:
        return [
            outcome
            for outcome in self.modules
            if outcome.status == MODULE_SKIPPED_UNIMPORTANT
        ]

    def report_for(self, base_name: str) -> Optional[ProcessingReport]:
        for outcome in self.modules:
            if outcome.module.base_name == base_name:
                return outcome.report
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totals": {
                "modules": len(self.modules),
                "skipped_modules": len(self.skipped_modules),
                "failed_modules": len(self.failed_modules),
                "processed": self.processed,
                "skipped_generated": self.skipped_generated,
                "failed_types": self.failed_types,
            },
            "modules": [outcome.to_dict() for outcome in self.modules],
        }
