"""Engine backed by dnfile metadata reading and the ilspycmd command-line decompiler."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import dnfile
import pefile

from ..logging import get_logger
from ..models import TypeDescriptor
from .base import DecompileError, DecompilerEngine, ModuleBinding, ModuleOpenError, ResolverContext


@dataclass(frozen=True)
class TypeDefRow:
    """Name and namespace of one row of the TypeDef metadata table."""

    name: str
    namespace: str


@dataclass(frozen=True)
class ModuleMetadata:
    """TypeDef rows (1-based order preserved) and nested -> enclosing row indexes."""

    types: Tuple[TypeDefRow, ...]
    enclosing: Mapping[int, int]


CommandRunner = Callable[[Sequence[str], Optional[float]], str]
MetadataReader = Callable[[Path], ModuleMetadata]


def split_arity(metadata_name: str) -> str:
    """Strip a generic arity suffix (`List`1` -> `List`)."""
    head, sep, tail = metadata_name.rpartition("`")
    if sep and tail.isdigit():
        return head
    return metadata_name


def describe_types(metadata: ModuleMetadata) -> List[TypeDescriptor]:
    """Build descriptors whose handle is the reflection name ilspycmd accepts."""
    reflection: Dict[int, str] = {}
    full: Dict[int, str] = {}

    def _resolve(index: int, visiting: frozenset[int] = frozenset()) -> Tuple[str, str]:
        if index in reflection:
            return reflection[index], full[index]
        row = metadata.types[index - 1]
        parent = metadata.enclosing.get(index)
        visiting = visiting | {index}
        if parent is not None and 0 < parent <= len(metadata.types) and parent not in visiting:
            parent_reflection, parent_full = _resolve(parent, visiting)
            reflection_name = f"{parent_reflection}+{row.name}"
            full_name = f"{parent_full}.{split_arity(row.name)}"
        else:
            prefix = f"{row.namespace}." if row.namespace else ""
            reflection_name = f"{prefix}{row.name}"
            full_name = f"{prefix}{split_arity(row.name)}"
        reflection[index] = reflection_name
        full[index] = full_name
        return reflection_name, full_name

    descriptors: List[TypeDescriptor] = []
    for index, row in enumerate(metadata.types, start=1):
        reflection_name, full_name = _resolve(index)
        descriptors.append(
            TypeDescriptor(name=split_arity(row.name), full_name=full_name, handle=reflection_name)
        )
    return descriptors


def read_metadata(path: Path) -> ModuleMetadata:
    """Read TypeDef and NestedClass tables with dnfile."""
    try:
        pe = dnfile.dnPE(str(path))
    except (OSError, pefile.PEFormatError) as exc:
        raise ModuleOpenError(f"{path.name}: {exc}") from exc

    try:
        net = pe.net
        if net is None or net.mdtables is None:
            raise ModuleOpenError(f"{path.name}: no .NET metadata found")
        typedef_table = net.mdtables.TypeDef
        rows = typedef_table.rows if typedef_table is not None else []
        types = tuple(
            TypeDefRow(name=_text(row.TypeName), namespace=_text(row.TypeNamespace))
            for row in rows
        )
        enclosing: Dict[int, int] = {}
        nested_table = net.mdtables.NestedClass
        for row in nested_table.rows if nested_table is not None else []:
            nested_index = getattr(row.NestedClass, "row_index", None)
            enclosing_index = getattr(row.EnclosingClass, "row_index", None)
            if isinstance(nested_index, int) and isinstance(enclosing_index, int):
                enclosing[nested_index] = enclosing_index
    finally:
        pe.close()

    return ModuleMetadata(types=types, enclosing=enclosing)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    inner = getattr(value, "value", value)
    if isinstance(inner, bytes):
        return inner.decode("utf-8", errors="replace")
    return str(inner)


class IlspyBinding(ModuleBinding):
    """Binding for one module; each decompile call runs ilspycmd for a single type.

    Every call starts a separate ilspycmd process that reloads the module and its
    references, so a module costs one process start per authored type.
    """

    def __init__(
        self,
        path: Path,
        descriptors: Sequence[TypeDescriptor],
        *,
        executable: str,
        resolver: ResolverContext,
        timeout: Optional[float],
        runner: CommandRunner,
    ) -> None:
        self.path = path
        self._descriptors = list(descriptors)
        self._executable = executable
        self._resolver = resolver
        self._timeout = timeout
        self._runner = runner
        self.process_count = 0
        self.logger = get_logger("engines.ilspy")

    def list_types(self) -> Sequence[TypeDescriptor]:
        return list(self._descriptors)

    def command_for(self, handle: Any) -> List[str]:
        command = [self._executable, str(self.path), "-t", str(handle)]
        for search_path in self._resolver.search_paths:
            command.extend(["-r", str(search_path)])
        return command

    def decompile(self, handle: Any) -> str:
        self.process_count += 1
        return self._runner(self.command_for(handle), self._timeout)

    def close(self) -> None:
        self.logger.debug(
            "%s: started %s %d time(s)", self.path.name, self._executable, self.process_count
        )


class IlspyEngine(DecompilerEngine):
    """Opens modules with dnfile and decompiles types through ilspycmd."""

    def __init__(
        self,
        executable: str = "ilspycmd",
        *,
        timeout: Optional[float] = 120.0,
        runner: CommandRunner | None = None,
        metadata_reader: MetadataReader | None = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self._runner = runner or self._default_runner
        self._metadata_reader = metadata_reader or read_metadata
        self.logger = get_logger("engines.ilspy")

    def open_module(self, path: Path, resolver: ResolverContext) -> ModuleBinding:
        if not path.is_file():
            raise ModuleOpenError(f"Module file not found: {path}")
        metadata = self._metadata_reader(path)
        descriptors = describe_types(metadata)
        self.logger.debug("%s declares %d type(s)", path.name, len(descriptors))
        return IlspyBinding(
            path,
            descriptors,
            executable=self.executable,
            resolver=resolver,
            timeout=self.timeout,
            runner=self._runner,
        )

    @staticmethod
    def _default_runner(command: Sequence[str], timeout: Optional[float]) -> str:
        try:
            completed = subprocess.run(
                list(command),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise DecompileError(f"Decompiler executable not found: {command[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise DecompileError(f"Decompiler timed out after {timeout}s") from exc
        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout or "").strip()
            raise DecompileError(
                f"{command[0]} exited with status {completed.returncode}: {detail}"
            )
        return completed.stdout


__all__ = [
    "CommandRunner",
    "IlspyBinding",
    "IlspyEngine",
    "ModuleMetadata",
    "TypeDefRow",
    "describe_types",
    "read_metadata",
    "split_arity",
]
