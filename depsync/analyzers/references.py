"""Normalisation of module references to dependency names."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

_RELATIVE_SEGMENTS = {".", ".."}


def resolve_reference(reference: str) -> Optional[str]:
    """Return the manifest key a module reference depends on.

    ``@scope/name/sub/path`` resolves to ``@scope/name`` and ``name/sub`` to
    ``name``. Relative references resolve to None.
    """
    parts = reference.split("/")
    if parts[0] in _RELATIVE_SEGMENTS:
        return None
    if reference.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def resolve_references(references: Iterable[str]) -> List[str]:
    """Resolve, deduplicate and sort a collection of module references."""
    names: Set[str] = set()
    for reference in references:
        name = resolve_reference(reference)
        if name:
            names.add(name)
    return sorted(names)


__all__ = ["resolve_reference", "resolve_references"]
