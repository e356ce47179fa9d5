"""Generated-type rule implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Iterable, List, Sequence, Set

from .base import GeneratedTypeRule
from .builtin import BUILTIN_RULE_NAMES, DEFAULT_GENERATED_PREFIXES, PatternRule, builtin_rules

_ENTRY_POINT_GROUP = "typesift.rules"


def discover_rules(
    *,
    extra_prefixes: Sequence[str] = (),
    extra_patterns: Sequence[str] = (),
    disabled: Sequence[str] = (),
    include_entry_points: bool = True,
) -> List[GeneratedTypeRule]:
    """Return the active rule set: built-ins, configured patterns and plugins."""

    disabled_set: Set[str] = {name.lower() for name in disabled}
    unknown = set(disabled_set)

    rules: List[GeneratedTypeRule] = []
    seen: Set[str] = set()

    def _add(rule: GeneratedTypeRule) -> None:
        if not isinstance(rule, GeneratedTypeRule):
            raise TypeError(f"Rule {rule!r} is not a GeneratedTypeRule instance")
        key = rule.name.lower()
        unknown.discard(key)
        if key in disabled_set or key in seen:
            return
        rules.append(rule)
        seen.add(key)

    for rule in builtin_rules(extra_prefixes):
        _add(rule)

    for index, pattern in enumerate(extra_patterns):
        _add(PatternRule(f"pattern-{index + 1}", pattern))

    if include_entry_points:
        for entry in _iter_entry_points():
            try:
                loaded = entry.load()
            except Exception as exc:  # pragma: no cover
                raise RuntimeError(f"Failed to load rule entry point '{entry.name}': {exc}") from exc
            rule = _coerce_rule(loaded)
            if not rule.name:
                rule.name = entry.name
            _add(rule)

    if unknown:
        missing = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown rules cannot be disabled: {missing}")

    return rules


def _coerce_rule(obj: object) -> GeneratedTypeRule:
    if isinstance(obj, GeneratedTypeRule):
        return obj
    if isinstance(obj, type) and issubclass(obj, GeneratedTypeRule):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, GeneratedTypeRule):
            return instance
    raise TypeError("Rule entry point must be a GeneratedTypeRule subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "BUILTIN_RULE_NAMES",
    "DEFAULT_GENERATED_PREFIXES",
    "GeneratedTypeRule",
    "PatternRule",
    "discover_rules",
]
