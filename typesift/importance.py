"""Selection of modules worth decompiling."""

from __future__ import annotations

from typing import Iterable, Tuple

DEFAULT_IMPORTANT_PREFIXES: Tuple[str, ...] = (
    "Facepunch",
    "Assembly-CSharp",
    "Oxide",
    "Rust",
    "0Harmony",
)


def should_process(module_base_name: str, important_prefixes: Iterable[str]) -> bool:
    """Return True when the module name starts with any prefix, ignoring case."""
    if not module_base_name:
        return False
    name = module_base_name.casefold()
    return any(
        prefix and name.startswith(prefix.casefold()) for prefix in important_prefixes
    )


__all__ = ["DEFAULT_IMPORTANT_PREFIXES", "should_process"]
