"""Tests for the tree-sitter import extractor."""

from __future__ import annotations

from pathlib import Path

import pytest

from depsync.analyzers import ImportExtractor, SourceParseError, extract_package_imports


def test_extractor_collects_import_declarations() -> None:
    source = """
import React from 'react';
import { Widget } from '@lumino/widgets';
import * as path from "path";
import type { Token } from '@lumino/coreutils';
import './side-effect';

export function render(): void {}
"""
    imports = ImportExtractor().extract_source(source, path="index.ts")

    assert imports == [
        "react",
        "@lumino/widgets",
        "path",
        "@lumino/coreutils",
        "./side-effect",
    ]


def test_extractor_collects_import_equals_require() -> None:
    source = "import fs = require('fs-extra');\nconst x = require('ignored');\n"

    assert ImportExtractor().extract_source(source, path="index.ts") == ["fs-extra"]


def test_extractor_ignores_dynamic_imports_and_reexports() -> None:
    source = """
export { value } from './value';
export async function load() {
  return import('lazy-module');
}
"""
    assert ImportExtractor().extract_source(source, path="index.ts") == []


def test_extractor_parses_tsx_files() -> None:
    source = """
import * as React from 'react';

export const App = () => <div className="app">hello</div>;
"""
    assert ImportExtractor().extract_source(source, path="app.tsx") == ["react"]


def test_extractor_reports_parse_errors_with_line() -> None:
    source = "import React from 'react';\nimport { from 'broken';\n"

    with pytest.raises(SourceParseError) as excinfo:
        ImportExtractor().extract_source(source, path="broken.ts")

    assert excinfo.value.path == "broken.ts"
    assert excinfo.value.line is not None
    assert "broken.ts" in str(excinfo.value)


def test_extract_package_imports_walks_src_tree(tmp_path: Path) -> None:
    src = tmp_path / "src"
    (src / "widgets").mkdir(parents=True)
    (src / "index.ts").write_text("import { a } from 'alpha';\n", encoding="utf-8")
    (src / "widgets" / "panel.tsx").write_text(
        "import { b } from '@scope/beta/lib/b';\n", encoding="utf-8"
    )
    (src / "notes.md").write_text("import x from 'nope';\n", encoding="utf-8")
    (tmp_path / "index.ts").write_text("import x from 'outside';\n", encoding="utf-8")

    imports = extract_package_imports(tmp_path)

    assert imports == ["alpha", "@scope/beta/lib/b"]


def test_extractor_finds_imports_in_nested_blocks() -> None:
    source = """
namespace Outer {
  import fs = require('fs-extra');
}

declare module 'ambient' {
  import { Inner } from 'inner-lib';
}
"""
    assert ImportExtractor().extract_source(source, path="nested.ts") == [
        "fs-extra",
        "inner-lib",
    ]


def test_extractor_accepts_exported_import_equals() -> None:
    source = "export import y = require('exported-lib');\n"

    assert ImportExtractor().extract_source(source, path="a.ts") == ["exported-lib"]


def test_extractor_resolves_string_escapes() -> None:
    source = "import a from 'we\\'ird';\nimport b from \"\\x40scope/\\u0070kg\";\n"

    assert ImportExtractor().extract_source(source, path="a.ts") == ["we'ird", "@scope/pkg"]
