"""Contracts for decompiler engines consumed by the pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence, Tuple

from ..models import TypeDescriptor


class EngineError(RuntimeError):
    """Base class for decompiler engine failures."""


class ModuleOpenError(EngineError):
    """Raised when a module cannot be read or is not a valid managed module."""


class DecompileError(EngineError):
    """Raised when a single type cannot be decompiled."""


@dataclass(frozen=True)
class ResolverContext:
    """Directories searched for assemblies referenced by the module being decompiled."""

    search_paths: Tuple[Path, ...] = field(default_factory=tuple)


class ModuleBinding(ABC):
    """An open module, scoped to a single module file."""

    @abstractmethod
    def list_types(self) -> Sequence[TypeDescriptor]:
        """Return every type definition declared by the module."""

    @abstractmethod
    def decompile(self, handle: Any) -> str:
        """Return the source text for the type identified by ``handle``."""

    def close(self) -> None:
        """Release resources held by the binding."""

    def __enter__(self) -> "ModuleBinding":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DecompilerEngine(ABC):
    """Factory for per-module bindings."""

    @abstractmethod
    def open_module(self, path: Path, resolver: ResolverContext) -> ModuleBinding:
        """Open ``path``; raise ModuleOpenError for unreadable or corrupt input."""
