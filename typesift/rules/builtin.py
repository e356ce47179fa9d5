"""Built-in rules recognising compiler-synthesised type names."""

from __future__ import annotations

import re
from typing import Iterable, Pattern, Sequence, Tuple

from .base import GeneratedTypeRule

DEFAULT_GENERATED_PREFIXES: Tuple[str, ...] = (
    "__StaticArrayInit",
    "<>",
    "<PrivateImplementationDetails>",
    "EmbeddedAttribute",
    "IsReadOnlyAttribute",
    "<Module>",
    "$ArrayType=",
)

_COMPILER_ATTRIBUTE_MARKERS: Tuple[str, ...] = (
    "CompilerGenerated",
    "NullableContext",
    "Nullable",
)


class LiteralPrefixRule(GeneratedTypeRule):
    """Static array init holders, implementation-detail containers and marker types."""

    name = "literal-prefix"

    def __init__(self, prefixes: Iterable[str] = DEFAULT_GENERATED_PREFIXES) -> None:
        self.prefixes: Tuple[str, ...] = tuple(prefix for prefix in prefixes if prefix)

    def matches(self, type_name: str) -> bool:
        return type_name.startswith(self.prefixes) if self.prefixes else False


class PatternRule(GeneratedTypeRule):
    """Matches when a regular expression is found anywhere in the name."""

    def __init__(self, name: str, pattern: str | Pattern[str]) -> None:
        self.name = name
        self.pattern: Pattern[str] = re.compile(pattern) if isinstance(pattern, str) else pattern

    def matches(self, type_name: str) -> bool:
        return self.pattern.search(type_name) is not None


class EmbeddedGuidRule(PatternRule):
    def __init__(self) -> None:
        super().__init__(
            "embedded-guid",
            r"<[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}>",
        )


class StateMachineRule(PatternRule):
    """Async and iterator state machines (`<Run>d__3`)."""

    def __init__(self) -> None:
        super().__init__("state-machine", r"<.*>d__\d+")


class FixedBufferRule(PatternRule):
    def __init__(self) -> None:
        super().__init__("fixed-buffer", r"<.*>e__FixedBuffer")


class AnonStoreyRule(PatternRule):
    """Closures emitted by the legacy Mono compiler."""

    def __init__(self) -> None:
        super().__init__("anon-storey", r"<.*>c__AnonStorey\d+")


class LegacyIteratorRule(PatternRule):
    def __init__(self) -> None:
        super().__init__("legacy-iterator", r"<.*>c__Iterator\d+")


class CompilerAttributeRule(GeneratedTypeRule):
    """Attribute plumbing such as `NullableAttribute` or `CompilerGeneratedAttribute`."""

    name = "compiler-attribute"

    def matches(self, type_name: str) -> bool:
        if "Attribute" not in type_name:
            return False
        return any(marker in type_name for marker in _COMPILER_ATTRIBUTE_MARKERS)


class LocalFunctionRule(GeneratedTypeRule):
    name = "local-function"

    def matches(self, type_name: str) -> bool:
        return type_name.startswith("<") and "g__" in type_name


def builtin_rules(extra_prefixes: Sequence[str] = ()) -> list[GeneratedTypeRule]:
    """Return fresh instances of every built-in rule."""
    prefixes = tuple(DEFAULT_GENERATED_PREFIXES) + tuple(extra_prefixes)
    return [
        LiteralPrefixRule(prefixes),
        EmbeddedGuidRule(),
        StateMachineRule(),
        FixedBufferRule(),
        AnonStoreyRule(),
        LegacyIteratorRule(),
        CompilerAttributeRule(),
        LocalFunctionRule(),
    ]


BUILTIN_RULE_NAMES: Tuple[str, ...] = tuple(rule.name for rule in builtin_rules())


__all__ = [
    "AnonStoreyRule",
    "BUILTIN_RULE_NAMES",
    "CompilerAttributeRule",
    "DEFAULT_GENERATED_PREFIXES",
    "EmbeddedGuidRule",
    "FixedBufferRule",
    "LegacyIteratorRule",
    "LiteralPrefixRule",
    "LocalFunctionRule",
    "PatternRule",
    "StateMachineRule",
    "builtin_rules",
]
