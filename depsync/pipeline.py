"""Ordered pipeline of manifest transformation steps."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import (
    Any,
    Awaitable,
    Callable,
    FrozenSet,
    List,
    Mapping,
    Sequence,
    Tuple,
    Union,
)

from .analyzers import ImportExtractor
from .config import DEFAULT_TEST_LIBRARIES, DocsConfig
from .models import ExceptionLists
from .registry import DependencyVersionCache
from .writer import SourceFormatter


@dataclass
class EnsureOptions:
    """Inputs for ensuring a single package."""

    pkg_path: Path
    data: Mapping[str, Any]
    cache: DependencyVersionCache
    exceptions: ExceptionLists = field(default_factory=ExceptionLists)
    css_imports: List[str] = field(default_factory=list)
    check_unused: bool = True
    formatter: SourceFormatter | None = None
    extractor: ImportExtractor | None = None
    namespace: str = "depsync"
    test_libraries: Sequence[str] = DEFAULT_TEST_LIBRARIES
    prepublish_script: str = "npm run build"
    docs: DocsConfig = field(default_factory=DocsConfig)

    @property
    def name(self) -> str:
        name = self.data.get("name")
        return name if isinstance(name, str) else ""


@dataclass(frozen=True)
class EnsureState:
    """Snapshot of the manifest and everything detected so far.

    Steps never mutate a state; they return a new one.
    """

    manifest: Mapping[str, Any]
    messages: Tuple[str, ...] = ()
    imports: Tuple[str, ...] = ()
    names: Tuple[str, ...] = ()
    published: FrozenSet[Path] = frozenset()
    styles: Tuple[Path, ...] = ()

    def warn(self, *messages: str) -> "EnsureState":
        if not messages:
            return self
        return replace(self, messages=self.messages + tuple(messages))

    def with_fields(self, fields: Mapping[str, Any]) -> "EnsureState":
        return replace(self, manifest={**self.manifest, **fields})

    def without(self, *keys: str) -> "EnsureState":
        if not any(key in self.manifest for key in keys):
            return self
        manifest = {key: value for key, value in self.manifest.items() if key not in keys}
        return replace(self, manifest=manifest)


@dataclass
class EnsureResult:
    """Final manifest and the change messages produced for it."""

    manifest: Mapping[str, Any]
    messages: List[str]


Step = Callable[[EnsureState, EnsureOptions], Union[EnsureState, Awaitable[EnsureState]]]


async def run_steps(
    state: EnsureState, steps: Sequence[Step], options: EnsureOptions
) -> EnsureState:
    """Apply ``steps`` in order, awaiting the asynchronous ones."""
    for step in steps:
        result = step(state, options)
        if inspect.isawaitable(result):
            result = await result
        state = result
    return state


__all__ = ["EnsureOptions", "EnsureResult", "EnsureState", "Step", "run_steps"]
