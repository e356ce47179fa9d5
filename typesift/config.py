"""Configuration loading for typesift (.typesift.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import yaml

from .importance import DEFAULT_IMPORTANT_PREFIXES

CONFIG_FILENAME = ".typesift.yml"
DEFAULT_EXTENSION = ".cstxt"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class ClassifierConfig:
    """Additions to and exclusions from the generated-type rule set."""

    extra_prefixes: Tuple[str, ...] = ()
    extra_patterns: Tuple[str, ...] = ()
    disabled: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EngineConfig:
    """Decompiler engine invocation settings."""

    executable: str = "ilspycmd"
    timeout: Optional[float] = 120.0
    reference_paths: Tuple[Path, ...] = ()


@dataclass(frozen=True)
class OutputConfig:
    """Output file naming and housekeeping."""

    extension: str = DEFAULT_EXTENSION
    prune_stale: bool = False
    report_file: Optional[Path] = None
    log_file: Optional[Path] = None


@dataclass(frozen=True)
class SiftConfig:
    """Read-only settings shared by every module of a run."""

    root: Path
    source_dir: Path
    output_dir: Path
    module_patterns: Tuple[str, ...] = ("*.dll",)
    important_prefixes: Tuple[str, ...] = DEFAULT_IMPORTANT_PREFIXES
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def with_overrides(
        self,
        *,
        source_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        important_prefixes: Optional[Sequence[str]] = None,
        report_file: Optional[Path] = None,
        log_file: Optional[Path] = None,
    ) -> "SiftConfig":
        """Return a copy with command-line values taking precedence."""
        updated = self
        if source_dir is not None:
            updated = replace(updated, source_dir=source_dir.expanduser().resolve())
        if output_dir is not None:
            updated = replace(updated, output_dir=output_dir.expanduser().resolve())
        if important_prefixes:
            updated = replace(updated, important_prefixes=tuple(important_prefixes))
        if report_file is not None:
            updated = replace(updated, output=replace(updated.output, report_file=report_file))
        if log_file is not None:
            updated = replace(updated, output=replace(updated.output, log_file=log_file))
        return updated

    def output_path(self, path: Path) -> Path:
        """Resolve a report or log path; relative paths land in the output root."""
        return path if path.is_absolute() else self.output_dir / path


def default_config(root: Path) -> SiftConfig:
    root = root.resolve()
    return SiftConfig(
        root=root,
        source_dir=root / "Managed",
        output_dir=root / ".knowledge" / "Decompiled",
    )


def load_config(config_path: Path) -> SiftConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    defaults = default_config(root)

    if not config_file.exists():
        return defaults

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_dir = _as_path(data.get("source_dir"), root) or defaults.source_dir
    output_dir = _as_path(data.get("output_dir"), root) or defaults.output_dir
    module_patterns = _as_str_tuple(data.get("module_patterns")) or defaults.module_patterns
    prefixes = data.get("important_prefixes")
    important_prefixes = (
        _as_str_tuple(prefixes) if prefixes is not None else defaults.important_prefixes
    )

    classifier_data = _as_dict(data.get("classifier"))
    classifier = ClassifierConfig(
        extra_prefixes=_as_str_tuple(classifier_data.get("extra_prefixes")),
        extra_patterns=_as_str_tuple(classifier_data.get("extra_patterns")),
        disabled=_as_str_tuple(classifier_data.get("disabled")),
    )
    for pattern in classifier.extra_patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(f"Invalid classifier pattern {pattern!r}: {exc}") from exc

    engine_data = _as_dict(data.get("engine"))
    engine = EngineConfig(
        executable=_as_str(engine_data.get("executable")) or EngineConfig.executable,
        timeout=(
            _as_float(engine_data.get("timeout"))
            if "timeout" in engine_data
            else EngineConfig.timeout
        ),
        reference_paths=tuple(
            path
            for path in (
                _as_path(item, root) for item in _as_str_tuple(engine_data.get("reference_paths"))
            )
            if path is not None
        ),
    )

    output_data = _as_dict(data.get("output"))
    extension = _as_str(output_data.get("extension")) or DEFAULT_EXTENSION
    if not extension.startswith("."):
        extension = f".{extension}"
    report_name = _as_str(output_data.get("report_file"))
    log_name = _as_str(output_data.get("log_file"))
    output = OutputConfig(
        extension=extension,
        prune_stale=bool(output_data.get("prune_stale", False)),
        report_file=Path(report_name) if report_name else None,
        log_file=Path(log_name) if log_name else None,
    )

    return SiftConfig(
        root=root,
        source_dir=source_dir,
        output_dir=output_dir,
        module_patterns=module_patterns,
        important_prefixes=important_prefixes,
        classifier=classifier,
        engine=engine,
        output=output,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_path(value: Any, root: Path) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value if isinstance(item, (str, int, float)))
    return ()


__all__ = [
    "CONFIG_FILENAME",
    "ClassifierConfig",
    "ConfigError",
    "EngineConfig",
    "OutputConfig",
    "SiftConfig",
    "default_config",
    "load_config",
]
