"""Tests for placeholder template rendering."""

from __future__ import annotations

import pytest
from jinja2 import UndefinedError

from depsync.templates import HEADER_TEMPLATE, from_template


def test_from_template_indents_multiline_values() -> None:
    template = """
const items = [
  {{items}}
];
"""
    rendered = from_template(template, {"items": "'a',\n'b',\n'c'"})

    assert rendered == "const items = [\n  'a',\n  'b',\n  'c'\n];\n"


def test_from_template_without_autoindent_keeps_values_verbatim() -> None:
    rendered = from_template("  {{items}}", {"items": "a\nb"}, autoindent=False)

    assert rendered == "a\nb\n"


def test_from_template_preserves_single_braces_and_custom_end() -> None:
    rendered = from_template(
        "import { createIcon } from '{{module}}';", {"module": "./icon"}, end=""
    )

    assert rendered == "import { createIcon } from './icon';"


def test_from_template_rejects_unbound_placeholders() -> None:
    with pytest.raises(UndefinedError):
        from_template("{{missing}}", {})


def test_header_names_the_generating_function() -> None:
    rendered = from_template(HEADER_TEMPLATE, {"funcName": "ensure_package"})

    assert rendered.startswith("/*----")
    assert "auto-generated by ensure_package() in depsync" in rendered
    assert rendered.endswith("*/\n")
