"""Generation of icon import tables and CSS classes from svg assets."""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePath
from typing import List

from .logging import get_logger
from .models import GeneratedFile, IconAsset
from .templates import (
    HEADER_TEMPLATE,
    ICON_CSS_CLASSES_TEMPLATE,
    ICON_IMPORTS_TEMPLATE,
    from_template,
)
from .writer import SourceFormatter, ensure_file

ICONS_DIR = Path("style") / "icons"
ICON_SRC_DIR = Path("src") / "icon"
ICON_CSS_DIR = Path("style")

_CAMEL_TOKEN = re.compile(r"(?:^\w|[A-Z]|\b\w|\s+|-+)")

logger = get_logger("icons")


def stem(path: Path) -> str:
    """Return the file name up to its first dot."""
    return path.name.split(".")[0]


def camel_case(value: str, upper: bool = False) -> str:
    """Convert a dashed or spaced name to camelCase (PascalCase with ``upper``)."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.isspace() or token.startswith("-"):
            return ""
        if match.start() == 0 and not upper:
            return token.lower()
        return token.upper()

    return _CAMEL_TOKEN.sub(_replace, value)


def discover_icons(pkg_path: Path) -> List[IconAsset]:
    """Return the svg icons of a package in enumeration order."""
    svgs = sorted(
        (path for path in (pkg_path / ICONS_DIR).glob("**/*.svg") if path.is_file()),
        key=lambda path: path.as_posix(),
    )
    return [IconAsset(name=stem(svg), path=svg) for svg in svgs]


def build_icon_imports(
    pkg_path: Path, icons: List[IconAsset], *, dynamic: bool = False
) -> GeneratedFile:
    """Describe the icon import table module for ``icons``."""
    icon_src_dir = pkg_path / ICON_SRC_DIR

    import_statements: List[str] = []
    model_declarations: List[str] = []
    wrapped_defs: List[str] = []
    for icon in icons:
        svgpath = _relative_posix(icon.path, icon_src_dir)
        if dynamic:
            model_declarations.append(
                f"{{ name: '{icon.name}', svg: require('{svgpath}').default }}"
            )
        else:
            svgname = camel_case(icon.name) + "Svg"
            iconname = camel_case(icon.name, True) + "Icon"
            import_statements.append(f"import {svgname} from '{svgpath}';")
            model_declarations.append(f"{{ name: '{icon.name}', svg: {svgname} }}")
            wrapped_defs.append(
                f"export const {iconname} = createIcon('{icon.name}', {svgname});"
            )

    return GeneratedFile(
        template=HEADER_TEMPLATE + ICON_IMPORTS_TEMPLATE,
        bindings={
            "funcName": "ensure_ui_components",
            "iconImportStatements": "\n".join(import_statements),
            "iconModelDeclarations": ",\n".join(model_declarations),
            "wrappedIconDefs": "\n".join(wrapped_defs),
        },
        target=icon_src_dir / "iconimports.ts",
    )


def build_icon_css(
    pkg_path: Path, icons: List[IconAsset], *, css_prefix: str = "jp"
) -> GeneratedFile:
    """Describe the deprecated CSS background-image classes for ``icons``."""
    icon_css_dir = pkg_path / ICON_CSS_DIR

    css_urls: List[str] = []
    css_declarations: List[str] = []
    for icon in icons:
        url_name = f"{css_prefix}-icon-{icon.name}"
        class_name = f"{css_prefix}-{camel_case(icon.name, True)}Icon"
        css_urls.append(f"--{url_name}: url('{_relative_posix(icon.path, icon_css_dir)}');")
        css_declarations.append(f".{class_name} {{background-image: var(--{url_name})}}")

    return GeneratedFile(
        template=HEADER_TEMPLATE + ICON_CSS_CLASSES_TEMPLATE,
        bindings={
            "funcName": "ensure_ui_components",
            "iconCSSUrls": "\n".join(css_urls),
            "iconCSSDeclarations": "\n".join(css_declarations),
        },
        target=icon_css_dir / "deprecated.css",
    )


def ensure_ui_components(
    pkg_path: Path,
    *,
    dynamic: bool = False,
    css_prefix: str = "jp",
    formatter: SourceFormatter | None = None,
) -> List[str]:
    """Keep the generated icon sources of a package in sync with its svg assets.

    ``dynamic`` switches the import table from static ``import`` statements to
    runtime ``require`` calls. Returns the change messages.
    """
    icons = discover_icons(pkg_path)
    logger.debug("Found %d icons in %s", len(icons), pkg_path / ICONS_DIR)

    messages: List[str] = []
    for generated in (
        build_icon_imports(pkg_path, icons, dynamic=dynamic),
        build_icon_css(pkg_path, icons, css_prefix=css_prefix),
    ):
        contents = from_template(generated.template, generated.bindings)
        messages.extend(
            ensure_file(
                generated.target,
                contents,
                prettify=generated.prettify,
                formatter=formatter,
            )
        )
    return messages


def _relative_posix(path: Path, start: Path) -> str:
    return PurePath(os.path.relpath(path, start)).as_posix()


__all__ = [
    "build_icon_css",
    "build_icon_imports",
    "camel_case",
    "discover_icons",
    "ensure_ui_components",
    "stem",
]
