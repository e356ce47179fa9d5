"""Classification of type names into authored and generated."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .rules import GeneratedTypeRule, discover_rules


class GeneratedTypeClassifier:
    """ORs a set of named rules over a type's simple name.

    The classifier holds no mutable state; the same name always yields the
    same answer for a given rule set.
    """

    def __init__(self, rules: Optional[Iterable[GeneratedTypeRule]] = None) -> None:
        self._rules: tuple[GeneratedTypeRule, ...] = tuple(
            rules if rules is not None else discover_rules(include_entry_points=False)
        )

    @property
    def rules(self) -> Sequence[GeneratedTypeRule]:
        return self._rules

    def match(self, type_name: str) -> Optional[str]:
        """Return the name of the first rule matching ``type_name``, if any."""
        for rule in self._rules:
            if rule.matches(type_name):
                return rule.name
        return None

    def is_generated(self, type_name: str) -> bool:
        return self.match(type_name) is not None


_DEFAULT_CLASSIFIER = GeneratedTypeClassifier()


def is_generated(type_name: str) -> bool:
    """Classify ``type_name`` against the built-in rules."""
    return _DEFAULT_CLASSIFIER.is_generated(type_name)


__all__ = ["GeneratedTypeClassifier", "is_generated"]
