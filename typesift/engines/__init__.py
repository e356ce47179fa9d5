"""Decompiler engine adapters."""

from .base import (
    DecompileError,
    DecompilerEngine,
    EngineError,
    ModuleBinding,
    ModuleOpenError,
    ResolverContext,
)
from .ilspy import IlspyEngine

__all__ = [
    "DecompileError",
    "DecompilerEngine",
    "EngineError",
    "IlspyEngine",
    "ModuleBinding",
    "ModuleOpenError",
    "ResolverContext",
]
