"""Placeholder templates for generated source files."""

from __future__ import annotations

import re
from typing import Mapping

from jinja2 import Environment, StrictUndefined

HEADER_TEMPLATE = """
/*-----------------------------------------------------------------------------
| This file was auto-generated by {{funcName}}() in depsync.
| Do not edit it by hand: changes are overwritten on the next run.
|----------------------------------------------------------------------------*/
"""

ICON_IMPORTS_TEMPLATE = """
import { createIcon } from './jlicon';
import { Icon } from './interfaces';

// icon svg import statements
{{iconImportStatements}}

// defaultIcons definition
export namespace IconImports {
  export const defaultIcons: ReadonlyArray<Icon.IModel> = [
    {{iconModelDeclarations}}
  ];
}

// wrapped icon definitions
{{wrappedIconDefs}}
"""

ICON_CSS_CLASSES_TEMPLATE = """
/**
 * (DEPRECATED) Support for consuming icons as CSS background images
 */

/* Icons urls */

:root {
  {{iconCSSUrls}}
}

/* Icon CSS class declarations */

{{iconCSSDeclarations}}
"""

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")
_LEADING_WHITESPACE = re.compile(r"[^\S\r\n]*")

_ENV = Environment(autoescape=False, keep_trailing_newline=True, undefined=StrictUndefined)


def from_template(
    template: str,
    substitutions: Mapping[str, str],
    *,
    autoindent: bool = True,
    end: str = "\n",
) -> str:
    """Substitute ``{{name}}`` placeholders in ``template``.

    With ``autoindent`` the continuation lines of a multi-line value get the
    indentation of the line holding its placeholder. The result is stripped
    and terminated with ``end``.
    """

    def _expression(match: re.Match[str]) -> str:
        name = match.group(1)
        if not autoindent:
            return "{{ %s }}" % name
        line_start = template.rfind("\n", 0, match.start()) + 1
        indent = _LEADING_WHITESPACE.match(template, line_start).group(0)  # type: ignore[union-attr]
        if not indent:
            return "{{ %s }}" % name
        return "{{ %s | indent(%r, blank=True) }}" % (name, indent)

    source = _PLACEHOLDER.sub(_expression, template)
    rendered = _ENV.from_string(source).render(**substitutions)
    return rendered.strip() + end


__all__ = [
    "HEADER_TEMPLATE",
    "ICON_CSS_CLASSES_TEMPLATE",
    "ICON_IMPORTS_TEMPLATE",
    "from_template",
]
