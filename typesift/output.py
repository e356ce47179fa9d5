"""Output tree layout: one directory per module, one text file per type."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List

from .config import DEFAULT_EXTENSION
from .logging import get_logger

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')


def safe_file_stem(name: str) -> str:
    """Replace characters that are not allowed in file names on common platforms."""
    return _UNSAFE_CHARS.sub("_", name)


class OutputOrganizer:
    """Creates module directories under the output root and maps types to files."""

    def __init__(self, output_root: Path, *, extension: str = DEFAULT_EXTENSION) -> None:
        self.output_root = Path(output_root)
        self.extension = extension
        self._module_dirs: Dict[str, Path] = {}
        self.logger = get_logger("output")

    def ensure_root(self) -> Path:
        """Create the output root; errors propagate to abort the run."""
        self.output_root.mkdir(parents=True, exist_ok=True)
        return self.output_root

    def ensure_module_dir(self, module_base_name: str) -> Path:
        cached = self._module_dirs.get(module_base_name)
        if cached is not None:
            return cached
        module_dir = self.output_root / module_base_name
        module_dir.mkdir(parents=True, exist_ok=True)
        self._module_dirs[module_base_name] = module_dir
        return module_dir

    def path_for(self, module_dir: Path, type_simple_name: str) -> Path:
        return module_dir / f"{safe_file_stem(type_simple_name)}{self.extension}"

    def write(self, path: Path, text: str) -> None:
        """Write ``text`` next to ``path`` and move it into place; a failed write leaves no file."""
        staging = path.with_name(f".{path.name}.tmp")
        try:
            staging.write_text(text, encoding="utf-8")
            staging.replace(path)
        except BaseException:
            staging.unlink(missing_ok=True)
            raise

    def prune_stale(self, module_dir: Path, keep: Iterable[Path]) -> List[Path]:
        """Delete output files in ``module_dir`` that were not written this run."""
        keep_set = {path.resolve() for path in keep}
        removed: List[Path] = []
        for candidate in sorted(module_dir.glob(f"*{self.extension}")):
            if candidate.resolve() in keep_set or not candidate.is_file():
                continue
            try:
                candidate.unlink()
            except OSError as exc:
                self.logger.warning("Unable to remove stale file %s: %s", candidate, exc)
                continue
            removed.append(candidate)
        if removed:
            self.logger.debug("Removed %d stale file(s) from %s", len(removed), module_dir)
        return removed


__all__ = ["OutputOrganizer", "safe_file_stem"]
