"""Core data models shared across depsync components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping


@dataclass
class ExceptionLists:
    """Caller-supplied exemptions from dependency accounting."""

    missing: List[str] = field(default_factory=list)
    unused: List[str] = field(default_factory=list)
    different_versions: List[str] = field(default_factory=list)
    locals: Dict[str, Path] = field(default_factory=dict)


@dataclass
class WorkspacePackage:
    """A package discovered in the workspace."""

    name: str
    path: Path
    data: Dict[str, Any]

    @property
    def version(self) -> str | None:
        version = self.data.get("version")
        return version if isinstance(version, str) else None


@dataclass(frozen=True)
class IconAsset:
    """An icon image found under a package's icon directory."""

    name: str
    path: Path


@dataclass(frozen=True)
class GeneratedFile:
    """Rendering contract for a generated source file."""

    template: str
    bindings: Mapping[str, str]
    target: Path
    prettify: bool = True
