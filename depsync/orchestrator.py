"""Runs package reconciliation across a workspace."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .analyzers import ImportExtractor
from .config import DepsyncConfig, load_config
from .icons import ensure_ui_components
from .logging import get_logger
from .models import ExceptionLists, WorkspacePackage
from .pipeline import EnsureOptions
from .reconciler import ensure_package
from .registry import DependencyLookup, DependencyVersionCache, RegistryClient, WorkspaceVersions
from .registry.cache import Lookup
from .workspace import discover_packages, local_paths
from .writer import NullFormatter, PrettierFormatter, SourceFormatter


@dataclass
class PackageOutcome:
    """Messages produced while ensuring one package."""

    name: str
    path: Path
    messages: List[str] = field(default_factory=list)


@dataclass
class RunOutcome:
    """Result of an ensure run over a workspace."""

    packages: List[PackageOutcome]

    @property
    def messages(self) -> List[str]:
        return [message for package in self.packages for message in package.messages]

    @property
    def changed(self) -> bool:
        return any(package.messages for package in self.packages)


class Orchestrator:
    """Coordinates workspace discovery, version resolution and per-package ensures."""

    def __init__(
        self,
        *,
        lookup: Lookup | None = None,
        formatter: SourceFormatter | None = None,
        extractor: ImportExtractor | None = None,
    ) -> None:
        self._lookup = lookup
        self._formatter = formatter
        self.extractor = extractor or ImportExtractor()
        self.logger = get_logger("orchestrator")

    def run_ensure(
        self,
        path: str | Path,
        *,
        config_path: Path | None = None,
        packages: Optional[Sequence[str]] = None,
        prettier: Optional[bool] = None,
    ) -> RunOutcome:
        """Ensure every selected package of the workspace rooted at ``path``."""
        root = Path(path).expanduser().resolve()
        config = load_config(config_path or root)
        workspace = discover_packages(root, config.packages)
        selected = self._select(workspace, packages)
        self.logger.info("Ensuring %d of %d packages in %s", len(selected), len(workspace), root)

        lookup = self._lookup or DependencyLookup(
            WorkspaceVersions(workspace), RegistryClient(config.registry)
        )
        cache = DependencyVersionCache(lookup, path=config.cache_file)
        formatter = self._resolve_formatter(config, prettier)

        outcome = asyncio.run(
            self._ensure_all(selected, local_paths(workspace), config, cache, formatter)
        )
        cache.persist()
        return outcome

    def run_icons(
        self,
        path: str | Path,
        *,
        dynamic: bool = False,
        css_prefix: str = "jp",
        prettier: bool = True,
    ) -> List[str]:
        """Regenerate the icon sources of a single package."""
        pkg_path = Path(path).expanduser().resolve()
        formatter = self._formatter or (PrettierFormatter() if prettier else NullFormatter())
        messages = ensure_ui_components(
            pkg_path, dynamic=dynamic, css_prefix=css_prefix, formatter=formatter
        )
        self.logger.debug("Icon generation produced %d messages", len(messages))
        return messages

    async def _ensure_all(
        self,
        selected: Sequence[WorkspacePackage],
        locals_map: Dict[str, Path],
        config: DepsyncConfig,
        cache: DependencyVersionCache,
        formatter: SourceFormatter,
    ) -> RunOutcome:
        outcomes: List[PackageOutcome] = []
        for package in selected:
            self.logger.info("Ensuring %s", package.name)
            outcome = PackageOutcome(name=package.name, path=package.path)
            if config.icons.package == package.name:
                outcome.messages.extend(
                    ensure_ui_components(
                        package.path,
                        dynamic=config.icons.dynamic,
                        css_prefix=config.icons.css_prefix,
                        formatter=formatter,
                    )
                )
            options = self._build_options(package, locals_map, config, cache, formatter)
            result = await ensure_package(options)
            outcome.messages.extend(result.messages)
            for message in outcome.messages:
                self.logger.debug("%s: %s", package.name, message)
            outcomes.append(outcome)
        return RunOutcome(packages=outcomes)

    def _build_options(
        self,
        package: WorkspacePackage,
        locals_map: Dict[str, Path],
        config: DepsyncConfig,
        cache: DependencyVersionCache,
        formatter: SourceFormatter,
    ) -> EnsureOptions:
        overrides = config.overrides_for(package.name)
        return EnsureOptions(
            pkg_path=package.path,
            data=package.data,
            cache=cache,
            exceptions=ExceptionLists(
                missing=list(overrides.missing),
                unused=list(overrides.unused),
                different_versions=list(config.different_versions),
                locals=dict(locals_map),
            ),
            css_imports=list(overrides.css_imports),
            check_unused=overrides.check_unused,
            formatter=formatter,
            extractor=self.extractor,
            namespace=config.namespace,
            test_libraries=tuple(config.test_libraries),
            prepublish_script=config.prepublish_script,
            docs=config.docs,
        )

    def _resolve_formatter(self, config: DepsyncConfig, prettier: Optional[bool]) -> SourceFormatter:
        if self._formatter is not None:
            return self._formatter
        enabled = config.prettier if prettier is None else prettier
        return PrettierFormatter() if enabled else NullFormatter()

    @staticmethod
    def _select(
        workspace: Sequence[WorkspacePackage], names: Optional[Sequence[str]]
    ) -> List[WorkspacePackage]:
        if not names:
            return list(workspace)
        known = {package.name for package in workspace}
        unknown = sorted(set(names) - known)
        if unknown:
            raise ValueError(f"Unknown packages requested: {', '.join(unknown)}")
        return [package for package in workspace if package.name in names]


__all__ = ["Orchestrator", "PackageOutcome", "RunOutcome"]
