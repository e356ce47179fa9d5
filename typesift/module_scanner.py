"""Discovery of compiled modules in the source directory."""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import List, Sequence

from .models import ModuleFile


class ModuleScanner:
    """Lists module files directly inside a directory, sorted by name."""

    def __init__(self, patterns: Sequence[str] = ("*.dll",)) -> None:
        self.patterns = tuple(patterns)

    def scan(self, source_dir: Path) -> List[ModuleFile]:
        source_path = Path(source_dir).expanduser().resolve()
        if not source_path.exists():
            raise FileNotFoundError(f"Source directory not found: {source_dir}")
        if not source_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {source_dir}")

        modules: List[ModuleFile] = []
        for path in sorted(source_path.iterdir(), key=lambda item: item.name.lower()):
            if not path.is_file():
                continue
            name = path.name.lower()
            if any(fnmatch(name, pattern.lower()) for pattern in self.patterns):
                modules.append(ModuleFile.from_path(path))
        return modules


__all__ = ["ModuleScanner"]
