"""Reconciliation of declared dependencies against source imports."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Sequence

from .analyzers import extract_package_imports, resolve_references
from .logging import get_logger
from .manifest import write_manifest
from .pipeline import EnsureOptions, EnsureResult, EnsureState, Step, run_steps
from .sync import (
    check_schemas,
    check_side_effects,
    check_style_files,
    collect_published_files,
    ensure_css_index,
    ensure_style_field,
    has_project_config,
    sync_project_references,
    sync_tdoptions,
    sync_typedoc_config,
)

logger = get_logger("reconciler")


async def _update_versions(
    state: EnsureState, options: EnsureOptions, key: str, label: str
) -> EnsureState:
    declared = state.manifest.get(key)
    if not isinstance(declared, Mapping) or not declared:
        return state
    names = [name for name in declared if name not in options.exceptions.different_versions]
    resolved = await options.cache.resolve_many(names)

    updated: Dict[str, Any] = dict(declared)
    messages: List[str] = []
    for name in names:
        version = resolved[name]
        if declared[name] != version:
            messages.append(f"Updated {label}: {name}@{version}")
            updated[name] = version
    if not messages:
        return state
    return state.with_fields({key: updated}).warn(*messages)


async def update_dependency_versions(state: EnsureState, options: EnsureOptions) -> EnsureState:
    return await _update_versions(state, options, "dependencies", "dependency")


async def update_dev_dependency_versions(
    state: EnsureState, options: EnsureOptions
) -> EnsureState:
    return await _update_versions(state, options, "devDependencies", "devDependency")


def extract_references(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Parse the package sources and record the dependency names they import."""
    imports = extract_package_imports(options.pkg_path, options.extractor)
    names = resolve_references(imports)
    logger.debug(
        "%s imports %d modules from %d packages", options.name, len(imports), len(names)
    )
    return replace(state, imports=tuple(imports), names=tuple(names))


def check_css_imports(state: EnsureState, options: EnsureOptions) -> EnsureState:
    if "example" in options.name:
        return state
    return state.warn(
        *(
            "CSS imports are not allowed source files"
            for reference in state.imports
            if ".css" in reference
        )
    )


async def add_missing_dependencies(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Declare every imported package the manifest does not list yet."""
    declared: Mapping[str, Any] = state.manifest.get("dependencies") or {}
    missing = [
        name
        for name in state.names
        if name not in options.exceptions.missing and not declared.get(name)
    ]
    if not missing:
        return state

    resolved = await options.cache.resolve_many(missing)
    updated = dict(declared)
    messages: List[str] = []
    for name in missing:
        updated[name] = resolved[name]
        messages.append(f"Added dependency: {name}@{resolved[name]}")
    return state.with_fields({"dependencies": updated}).warn(*messages)


def report_unused_dependencies(state: EnsureState, options: EnsureOptions) -> EnsureState:
    if not options.check_unused:
        return state
    declared: Mapping[str, Any] = state.manifest.get("dependencies") or {}
    is_test = "test" in options.name
    messages: List[str] = []
    for name, version in declared.items():
        if name in options.exceptions.unused:
            continue
        if is_test and name in options.test_libraries:
            continue
        if name not in state.names:
            messages.append(
                f"Unused dependency: {name}@{version}: remove or add to list of "
                "known unused dependencies for this package"
            )
    return state.warn(*messages)


def prune_empty_dependencies(state: EnsureState, options: EnsureOptions) -> EnsureState:
    empty = [
        key
        for key in ("dependencies", "devDependencies")
        if key in state.manifest and not state.manifest[key]
    ]
    return state.without(*empty)


def strip_git_head(state: EnsureState, options: EnsureOptions) -> EnsureState:
    # gitHead is only written temporarily while publishing.
    return state.without("gitHead")


def ensure_public_access(state: EnsureState, options: EnsureOptions) -> EnsureState:
    if state.manifest.get("private") is True:
        return state
    return state.with_fields({"publishConfig": {"access": "public"}})


def ensure_prepublish_script(state: EnsureState, options: EnsureOptions) -> EnsureState:
    if state.manifest.get("private"):
        return state
    scripts: Mapping[str, Any] = state.manifest.get("scripts") or {}
    if scripts.get("prepublishOnly"):
        return state
    return state.with_fields(
        {"scripts": {**scripts, "prepublishOnly": options.prepublish_script}}
    ).warn(f"prepublishOnly script missing in {options.pkg_path}")


VERSION_STEPS: Sequence[Step] = (
    update_dependency_versions,
    update_dev_dependency_versions,
)

PACKAGE_STEPS: Sequence[Step] = (
    sync_typedoc_config,
    extract_references,
    check_css_imports,
    add_missing_dependencies,
    ensure_css_index,
    report_unused_dependencies,
    sync_tdoptions,
    sync_project_references,
    collect_published_files,
    check_schemas,
    check_style_files,
    ensure_style_field,
    check_side_effects,
    prune_empty_dependencies,
    strip_git_head,
    ensure_public_access,
    ensure_prepublish_script,
)


async def reconcile(options: EnsureOptions) -> EnsureResult:
    """Run the reconciliation pipeline for one package without saving the manifest.

    Packages without a ``tsconfig.json`` only get their dependency versions
    corrected.
    """
    state = EnsureState(manifest=dict(options.data))
    state = await run_steps(state, VERSION_STEPS, options)
    if has_project_config(options.pkg_path):
        state = await run_steps(state, PACKAGE_STEPS, options)
    else:
        logger.debug("No tsconfig.json in %s; only versions were checked", options.pkg_path)
    return EnsureResult(manifest=state.manifest, messages=list(state.messages))


async def ensure_package(options: EnsureOptions) -> EnsureResult:
    """Reconcile a package and write its package.json when it changed."""
    result = await reconcile(options)
    if write_manifest(options.pkg_path / "package.json", result.manifest):
        result.messages.append("Updated package.json")
    return result


__all__ = [
    "PACKAGE_STEPS",
    "VERSION_STEPS",
    "add_missing_dependencies",
    "check_css_imports",
    "ensure_package",
    "ensure_prepublish_script",
    "ensure_public_access",
    "extract_references",
    "prune_empty_dependencies",
    "reconcile",
    "report_unused_dependencies",
    "strip_git_head",
    "update_dependency_versions",
    "update_dev_dependency_versions",
]
