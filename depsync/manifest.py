"""JSON persistence for package manifests and project files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping


def read_json_file(path: Path) -> Dict[str, Any]:
    """Return the parsed JSON object stored at ``path``."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return data


def format_json(data: Mapping[str, Any]) -> str:
    """Serialise ``data`` the way npm writes package.json files."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_file(path: Path, data: Mapping[str, Any]) -> bool:
    """Write ``data`` unless the file already holds an equal JSON value.

    Returns True when the file was written.
    """
    try:
        current = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        current = None
    if current == data:
        return False
    path.write_text(format_json(data), encoding="utf-8")
    return True


def read_manifest(path: Path) -> Dict[str, Any]:
    """Read a package.json file, or the package.json inside a directory."""
    if path.is_dir():
        path = path / "package.json"
    return read_json_file(path)


def write_manifest(path: Path, data: Mapping[str, Any]) -> bool:
    """Write a package.json file when its serialised text changed."""
    text = format_json(data)
    try:
        previous = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        previous = None
    if previous == text:
        return False
    path.write_text(text, encoding="utf-8")
    return True


__all__ = [
    "format_json",
    "read_json_file",
    "read_manifest",
    "write_json_file",
    "write_manifest",
]
