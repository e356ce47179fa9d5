"""Selective decompilation of managed modules into per-type source text."""

from .classifier import GeneratedTypeClassifier, is_generated
from .config import SiftConfig, load_config
from .importance import should_process
from .pipeline import DecompilationPipeline

__version__ = "0.1.0"

__all__ = [
    "DecompilationPipeline",
    "GeneratedTypeClassifier",
    "SiftConfig",
    "is_generated",
    "load_config",
    "should_process",
]
