"""Selective batch decompilation of important modules."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Set

from .classifier import GeneratedTypeClassifier
from .config import SiftConfig
from .engines import DecompilerEngine, ModuleBinding, ResolverContext
from .importance import should_process
from .logging import get_logger
from .models import (
    MODULE_COMPLETED,
    MODULE_FAILED,
    MODULE_SKIPPED_UNIMPORTANT,
    TYPE_FAILED,
    TYPE_SKIPPED_EMPTY,
    TYPE_SKIPPED_GENERATED,
    TYPE_WRITTEN,
    ModuleFile,
    ModuleOutcome,
    ProcessingReport,
    RunSummary,
    TypeDescriptor,
    TypeFailure,
    TypeOutcome,
)
from .module_scanner import ModuleScanner
from .output import OutputOrganizer, safe_file_stem
from .rules import discover_rules


class DecompilationPipeline:
    """Runs filter -> classify -> decompile -> write over every module, one at a time."""

    def __init__(
        self,
        config: SiftConfig,
        engine: DecompilerEngine,
        *,
        classifier: GeneratedTypeClassifier | None = None,
        scanner: ModuleScanner | None = None,
        organizer: OutputOrganizer | None = None,
    ) -> None:
        self.config = config
        self.engine = engine
        self.classifier = classifier or GeneratedTypeClassifier(
            discover_rules(
                extra_prefixes=config.classifier.extra_prefixes,
                extra_patterns=config.classifier.extra_patterns,
                disabled=config.classifier.disabled,
            )
        )
        self.scanner = scanner or ModuleScanner(config.module_patterns)
        self.organizer = organizer or OutputOrganizer(
            config.output_dir, extension=config.output.extension
        )
        self.resolver = ResolverContext(
            search_paths=(config.source_dir, *config.engine.reference_paths)
        )
        self.logger = get_logger("pipeline")

    def run(self, modules: Optional[Iterable[ModuleFile]] = None) -> RunSummary:
        """Process every discovered module and return the aggregated outcomes.

        Failure to create the output root propagates; every other failure is
        recorded against its type or module and the run carries on.
        """
        self.organizer.ensure_root()
        self.logger.info("Decompiling modules from %s", self.config.source_dir)
        self.logger.info("Writing results to %s", self.organizer.output_root)

        if modules is None:
            modules = self.scanner.scan(self.config.source_dir)

        summary = RunSummary()
        for module in modules:
            summary.modules.append(self.process_module(module))

        self.logger.info(
            "Finished: %d type(s) written, %d generated skipped, %d failed, %d module(s) failed",
            summary.processed,
            summary.skipped_generated,
            summary.failed_types,
            len(summary.failed_modules),
        )
        return summary

    def process_module(self, module: ModuleFile) -> ModuleOutcome:
        if not should_process(module.base_name, self.config.important_prefixes):
            self.logger.info("Skipping unimportant module: %s", module.base_name)
            return ModuleOutcome(module=module, status=MODULE_SKIPPED_UNIMPORTANT)

        self.logger.info("Processing module: %s", module.base_name)
        try:
            module_dir = self.organizer.ensure_module_dir(module.base_name)
            binding = self.engine.open_module(module.path, self.resolver)
        except Exception as exc:
            self.logger.error("Failed to process module %s: %s", module.path.name, exc)
            return ModuleOutcome(module=module, status=MODULE_FAILED, error=str(exc))

        report = ProcessingReport(module=module.base_name)
        with binding:
            try:
                types = list(binding.list_types())
            except Exception as exc:
                self.logger.error("Failed to list types of %s: %s", module.path.name, exc)
                return ModuleOutcome(module=module, status=MODULE_FAILED, error=str(exc))

            claimed: Set[str] = set()
            for descriptor in types:
                outcome = self._process_type(binding, descriptor, module_dir, claimed, report)
                report.record(outcome)

        if self.config.output.prune_stale:
            self.organizer.prune_stale(module_dir, report.written)

        self.logger.info(
            "%s: processed %d type(s), skipped %d generated, %d failed",
            module.base_name,
            report.processed,
            report.skipped_generated,
            len(report.failed),
        )
        return ModuleOutcome(module=module, status=MODULE_COMPLETED, report=report)

    def _process_type(
        self,
        binding: ModuleBinding,
        descriptor: TypeDescriptor,
        module_dir: Path,
        claimed: Set[str],
        report: ProcessingReport,
    ) -> TypeOutcome:
        if not descriptor.name:
            return TypeOutcome(name="", full_name=descriptor.full_name, status=TYPE_SKIPPED_EMPTY)

        rule = self.classifier.match(descriptor.name)
        if rule is not None:
            self.logger.debug("Skipping generated type %s (%s)", descriptor.full_name, rule)
            return TypeOutcome(
                name=descriptor.name,
                full_name=descriptor.full_name,
                status=TYPE_SKIPPED_GENERATED,
                rule=rule,
            )

        target = self.organizer.path_for(module_dir, descriptor.name)
        renamed = _claim_key(target) in claimed
        if renamed:
            qualified = self._qualified_path(module_dir, descriptor, claimed)
            if qualified is None:
                return self._failed(
                    descriptor, "write", "output file name collides with another type"
                )
            target = qualified

        try:
            text = binding.decompile(descriptor.handle)
        except Exception as exc:
            return self._failed(descriptor, "decompile", str(exc))

        try:
            self.organizer.write(target, text)
        except (OSError, UnicodeError, TypeError) as exc:
            return self._failed(descriptor, "write", str(exc))

        claimed.add(_claim_key(target))
        if renamed:
            self.logger.warning(
                "Type name %s already written in %s; wrote %s",
                descriptor.name,
                report.module,
                target.name,
            )
            report.renamed.append(descriptor.full_name)
        return TypeOutcome(
            name=descriptor.name,
            full_name=descriptor.full_name,
            status=TYPE_WRITTEN,
            path=target,
        )

    def _qualified_path(
        self, module_dir: Path, descriptor: TypeDescriptor, claimed: Set[str]
    ) -> Optional[Path]:
        if not descriptor.full_name or safe_file_stem(descriptor.full_name) == safe_file_stem(
            descriptor.name
        ):
            return None
        qualified = self.organizer.path_for(module_dir, descriptor.full_name)
        return None if _claim_key(qualified) in claimed else qualified

    def _failed(self, descriptor: TypeDescriptor, kind: str, error: str) -> TypeOutcome:
        self.logger.warning("Error processing type %s: %s", descriptor.full_name, error)
        return TypeOutcome(
            name=descriptor.name,
            full_name=descriptor.full_name,
            status=TYPE_FAILED,
            failure=TypeFailure(full_name=descriptor.full_name, error=error, kind=kind),
        )


def _claim_key(path: Path) -> str:
    # Output names must stay distinct on case-insensitive filesystems.
    return str(path).casefold()


__all__ = ["DecompilationPipeline"]
