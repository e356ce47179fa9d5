"""In-memory decompiler engine used to drive the pipeline in tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Set

from typesift.engines import DecompileError, DecompilerEngine, ModuleBinding, ModuleOpenError, ResolverContext
from typesift.models import TypeDescriptor


def descriptor(name: str, namespace: str = "Game") -> TypeDescriptor:
    full_name = f"{namespace}.{name}" if namespace and name else name
    return TypeDescriptor(name=name, full_name=full_name, handle=full_name or "<empty>")


class FakeBinding(ModuleBinding):
    def __init__(self, engine: "FakeEngine", module: str, types: Sequence[TypeDescriptor]) -> None:
        self._engine = engine
        self._module = module
        self._types = list(types)
        self.closed = False

    def list_types(self) -> Sequence[TypeDescriptor]:
        if self._module in self._engine.failing_listings:
            raise ModuleOpenError(f"{self._module}: metadata table is truncated")
        return list(self._types)

    def decompile(self, handle: Any) -> str:
        self._engine.decompiled.append((self._module, handle))
        if handle in self._engine.failing_types:
            raise DecompileError(f"cannot decompile {handle}")
        if handle in self._engine.texts:
            return self._engine.texts[handle]
        return f"// {self._module}\npublic class {handle} {{ }}\n"

    def close(self) -> None:
        self.closed = True


class FakeEngine(DecompilerEngine):
    """Serves type lists keyed by module base name."""

    def __init__(
        self,
        modules: Mapping[str, Sequence[TypeDescriptor]],
        *,
        failing_modules: Set[str] | None = None,
        failing_types: Set[str] | None = None,
        failing_listings: Set[str] | None = None,
        texts: Mapping[str, str] | None = None,
    ) -> None:
        self.modules = dict(modules)
        self.failing_modules = set(failing_modules or ())
        self.failing_types = set(failing_types or ())
        self.failing_listings = set(failing_listings or ())
        self.texts = dict(texts or {})
        self.opened: List[str] = []
        self.resolvers: List[ResolverContext] = []
        self.bindings: Dict[str, FakeBinding] = {}
        self.decompiled: List[tuple[str, Any]] = []

    def open_module(self, path: Path, resolver: ResolverContext) -> ModuleBinding:
        name = path.stem
        self.opened.append(name)
        self.resolvers.append(resolver)
        if name in self.failing_modules or name not in self.modules:
            raise ModuleOpenError(f"{path.name}: bad image")
        binding = FakeBinding(self, name, self.modules[name])
        self.bindings[name] = binding
        return binding


__all__ = ["FakeBinding", "FakeEngine", "descriptor"]
