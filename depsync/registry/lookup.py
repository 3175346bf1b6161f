"""Version lookup combining workspace knowledge with the package registry."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from ..logging import get_logger
from ..models import WorkspacePackage
from .client import RegistryClient, VersionLookupError

logger = get_logger("registry")


class WorkspaceVersions:
    """Answers version lookups from the packages of the workspace."""

    def __init__(self, packages: Iterable[WorkspacePackage]) -> None:
        self._packages: List[WorkspacePackage] = list(packages)

    def lookup(self, name: str) -> Optional[str]:
        """Return ``^version`` for sibling packages, else the most common specifier."""
        for package in self._packages:
            if package.name == name and package.version:
                return f"^{package.version}"

        counts: Counter[str] = Counter()
        for package in self._packages:
            for key in ("dependencies", "devDependencies"):
                deps = package.data.get(key)
                if isinstance(deps, dict) and isinstance(deps.get(name), str):
                    counts[deps[name]] += 1
        if not counts:
            return None
        # most_common keeps first-seen order among equal counts
        return counts.most_common(1)[0][0]


class DependencyLookup:
    """Resolves a dependency name to the version specifier it should use."""

    def __init__(
        self,
        workspace: WorkspaceVersions | None = None,
        registry: RegistryClient | None = None,
    ) -> None:
        self.workspace = workspace
        self.registry = registry

    def lookup(self, name: str) -> str:
        if self.workspace is not None:
            version = self.workspace.lookup(name)
            if version:
                logger.debug("Resolved %s to %s from the workspace", name, version)
                return version
        if self.registry is None:
            raise VersionLookupError(name, "not found in the workspace and no registry configured")
        return self.registry.lookup(name)

    __call__ = lookup


__all__ = ["DependencyLookup", "WorkspaceVersions"]
