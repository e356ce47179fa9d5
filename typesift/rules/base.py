"""Base classes for generated-type rules."""

from abc import ABC, abstractmethod


class GeneratedTypeRule(ABC):
    """Contract for predicates that flag compiler- or tool-generated type names."""

    name: str = ""

    @abstractmethod
    def matches(self, type_name: str) -> bool:
        """Return True when the simple type name looks generated."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
