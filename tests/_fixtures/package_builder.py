"""Helper utilities for constructing temporary workspaces in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Dict, Mapping

from depsync.manifest import format_json, read_manifest


class PackageBuilder:
    """Utility for writing packages into a throwaway workspace."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "workspace"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries relative to the workspace root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_json(self, relative: str, data: Any) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    def package(
        self,
        relative: str,
        manifest: Mapping[str, Any],
        files: Mapping[str, str] | None = None,
        *,
        tsconfig: bool = True,
    ) -> Path:
        """Create a package directory holding ``manifest`` and ``files``."""
        pkg_path = self.root / relative
        pkg_path.mkdir(parents=True, exist_ok=True)
        (pkg_path / "package.json").write_text(format_json(manifest), encoding="utf-8")
        if tsconfig:
            (pkg_path / "tsconfig.json").write_text("{}\n", encoding="utf-8")
        if files:
            self.write({f"{relative}/{name}": content for name, content in files.items()})
        return pkg_path

    def manifest(self, relative: str) -> Dict[str, Any]:
        """Return the package.json currently on disk for a package."""
        return read_manifest(self.root / relative)

    def path(self) -> Path:
        """Return the workspace root path."""
        return self.root


__all__ = ["PackageBuilder"]
