"""Synchronisation of project files that derive from the package manifest."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path, PurePath
from typing import Dict, List

from .globbing import glob_files
from .logging import get_logger
from .manifest import read_json_file, write_json_file
from .pipeline import EnsureOptions, EnsureState
from .templates import HEADER_TEMPLATE, from_template
from .writer import display_path, ensure_file

TSCONFIG = "tsconfig.json"
TYPEDOC_CONFIG = "typedoc.json"
TYPEDOC_OPTIONS = "tdoptions.json"
DEFAULT_SCHEMA_DIR = "schema"
DEFAULT_STYLE_ENTRY = "style/index.css"

logger = get_logger("sync")


def has_project_config(pkg_path: Path) -> bool:
    return (pkg_path / TSCONFIG).exists()


def sync_typedoc_config(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Point the typedoc output of the package at the shared API docs folder."""
    path = options.pkg_path / TYPEDOC_CONFIG
    if not path.exists():
        return state
    short_name = options.name.split("/")[-1]
    config = read_json_file(path)
    config.update(
        {
            "excludeNotExported": True,
            "mode": "file",
            "out": f"{options.docs.api_dir}/{short_name}",
            "theme": options.docs.theme,
        }
    )
    if write_json_file(path, config):
        return state.warn(f"Updated {display_path(path)}")
    return state


def ensure_css_index(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Generate ``style/index.css`` importing CSS dependencies before the base sheet."""
    style_dir = options.pkg_path / "style"
    if not (style_dir / "base.css").exists():
        return state

    contents = from_template(HEADER_TEMPLATE, {"funcName": "ensure_package"}, end="")
    for css_import in options.css_imports:
        contents += f"\n@import url('~{css_import}');"
    contents += "\n\n@import url('./base.css');\n"

    index_path = style_dir / "index.css"
    if not index_path.exists():
        index_path.touch()
    return state.warn(*ensure_file(index_path, contents, prettify=False))


def sync_tdoptions(state: EnsureState, options: EnsureOptions) -> EnsureState:
    path = options.pkg_path / TYPEDOC_OPTIONS
    if not path.exists():
        return state
    config = read_json_file(path)
    config["out"] = f"{options.docs.api_dir}/{options.pkg_path.resolve().name}"
    if write_json_file(path, config):
        return state.warn(f"Updated {display_path(path)}")
    return state


def sync_project_references(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Replace the tsconfig project references with the local sibling dependencies.

    The whole ``references`` list is rewritten, including entries that do not
    correspond to a dependency.
    """
    references: Dict[str, str] = {}
    for name in state.manifest.get("dependencies") or {}:
        target = options.exceptions.locals.get(name)
        if target is None or not (Path(target) / TSCONFIG).exists():
            continue
        references[name] = PurePath(os.path.relpath(target, options.pkg_path)).as_posix()

    if "example-" in options.name or not references:
        return state

    path = options.pkg_path / TSCONFIG
    config = read_json_file(path)
    config["references"] = [{"path": reference} for reference in references.values()]
    if write_json_file(path, config):
        logger.debug("Rewrote %d project references in %s", len(references), path)
        return state.warn(f"Updated {display_path(path)}")
    return state


def collect_published_files(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Record which files the manifest's ``files`` globs would publish."""
    published = set()
    files = state.manifest.get("files") or []
    for pattern in files:
        if isinstance(pattern, str):
            published.update(glob_files(options.pkg_path, pattern))
    return replace(state, published=frozenset(published))


def check_schemas(state: EnsureState, options: EnsureOptions) -> EnsureState:
    namespaced = state.manifest.get(options.namespace)
    schema_dir = namespaced.get("schemaDir") if isinstance(namespaced, dict) else None
    schemas = _files(options.pkg_path, f"{schema_dir or DEFAULT_SCHEMA_DIR}/*.json")

    messages: List[str] = []
    if schema_dir and not schemas:
        messages.append(f"No schemas found in {options.pkg_path / schema_dir}.")
    elif not schema_dir and schemas:
        messages.append(f"Schemas found, but no schema indicated in {options.pkg_path}")
    for schema in schemas:
        if schema not in state.published:
            messages.append(f"Schema {schema} not published in {options.pkg_path}")
    return state.warn(*messages)


def check_style_files(state: EnsureState, options: EnsureOptions) -> EnsureState:
    styles = _files(options.pkg_path, "style/**/*.*")
    messages = [
        f"Style file {style} not published in {options.pkg_path}"
        for style in styles
        if style not in state.published
    ]
    return replace(state, styles=tuple(styles)).warn(*messages)


def ensure_style_field(state: EnsureState, options: EnsureOptions) -> EnsureState:
    if state.styles and "style" not in state.manifest:
        return state.with_fields({"style": DEFAULT_STYLE_ENTRY})
    return state


def check_side_effects(state: EnsureState, options: EnsureOptions) -> EnsureState:
    """Styles are imported for their side effects, so bundlers must not drop them."""
    if not state.styles:
        return state
    if "sideEffects" not in state.manifest:
        return state.warn(
            f"Side effects not declared in {options.pkg_path}, and styles are present."
        )
    if state.manifest["sideEffects"] is False:
        return state.warn(f"Style files not included in sideEffects in {options.pkg_path}")
    return state


def _files(root: Path, pattern: str) -> List[Path]:
    return [path for path in glob_files(root, pattern) if path.is_file()]


__all__ = [
    "check_schemas",
    "check_side_effects",
    "check_style_files",
    "collect_published_files",
    "ensure_css_index",
    "ensure_style_field",
    "has_project_config",
    "sync_project_references",
    "sync_tdoptions",
    "sync_typedoc_config",
]
