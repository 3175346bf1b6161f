"""Discovery of the packages that make up a workspace."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from .globbing import glob_files
from .logging import get_logger
from .manifest import read_manifest
from .models import WorkspacePackage

DEFAULT_PACKAGE_PATTERNS = ("packages/*",)

_EXCLUDED_DIRS = {"node_modules", ".git", "lib", "build"}

logger = get_logger("workspace")


def workspace_patterns(root: Path, configured: Sequence[str] | None = None) -> List[str]:
    """Return the package globs, from configuration or the root package.json."""
    if configured:
        return list(configured)
    root_manifest = root / "package.json"
    try:
        data = read_manifest(root_manifest)
    except (FileNotFoundError, ValueError):
        return list(DEFAULT_PACKAGE_PATTERNS)
    workspaces = data.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if isinstance(workspaces, list):
        patterns = [item for item in workspaces if isinstance(item, str)]
        if patterns:
            return patterns
    return list(DEFAULT_PACKAGE_PATTERNS)


def discover_packages(root: Path, patterns: Sequence[str] | None = None) -> List[WorkspacePackage]:
    """Return the named packages matched by the workspace globs, sorted by path."""
    root = root.expanduser().resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Workspace path is not a directory: {root}")

    packages: Dict[Path, WorkspacePackage] = {}
    for pattern in workspace_patterns(root, patterns):
        for manifest_path in glob_files(root, f"{pattern.rstrip('/')}/package.json"):
            pkg_path = manifest_path.parent
            relative = pkg_path.relative_to(root)
            if any(part in _EXCLUDED_DIRS for part in relative.parts):
                continue
            try:
                data = read_manifest(manifest_path)
            except ValueError as exc:
                logger.warning("Skipping %s: %s", manifest_path, exc)
                continue
            name = data.get("name")
            if not isinstance(name, str) or not name:
                logger.debug("Skipping unnamed package at %s", pkg_path)
                continue
            packages[pkg_path] = WorkspacePackage(name=name, path=pkg_path, data=data)

    discovered = [packages[path] for path in sorted(packages, key=lambda path: path.as_posix())]
    logger.debug("Discovered %d packages under %s", len(discovered), root)
    return discovered


def local_paths(packages: Sequence[WorkspacePackage]) -> Dict[str, Path]:
    """Map package names to their directories."""
    return {package.name: package.path for package in packages}


__all__ = ["DEFAULT_PACKAGE_PATTERNS", "discover_packages", "local_paths", "workspace_patterns"]
