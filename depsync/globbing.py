"""Glob expansion with npm-style brace alternatives."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Set

_BRACES = re.compile(r"\{([^{}]*,[^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, e.g. ``*.{css,svg}`` to ``*.css`` and ``*.svg``."""
    match = _BRACES.search(pattern)
    if match is None:
        return [pattern]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(pattern[: match.start()] + option + pattern[match.end() :]))
    return expanded


def glob_files(root: Path, pattern: str) -> List[Path]:
    """Return the paths under ``root`` matching ``pattern``, sorted.

    Dot-files only match when the pattern names them explicitly.
    """
    matches: Set[Path] = set()
    for expanded in expand_braces(pattern):
        expanded = expanded.strip()
        while expanded.startswith("./"):
            expanded = expanded[2:]
        expanded = expanded.rstrip("/")
        if not expanded:
            continue
        allow_hidden = expanded.startswith(".") or "/." in expanded
        candidates = [expanded]
        # a trailing ** matches every file below, not only directories
        if expanded == "**" or expanded.endswith("/**"):
            candidates.append(f"{expanded}/*")
        for candidate in candidates:
            for path in root.glob(candidate):
                relative = path.relative_to(root)
                if not allow_hidden and any(part.startswith(".") for part in relative.parts):
                    continue
                matches.add(path)
    return sorted(matches, key=lambda path: path.as_posix())


__all__ = ["expand_braces", "glob_files"]
