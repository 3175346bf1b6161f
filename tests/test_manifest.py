"""Tests for package.json persistence."""

from __future__ import annotations

from pathlib import Path

import pytest

from depsync.manifest import (
    format_json,
    read_json_file,
    read_manifest,
    write_json_file,
    write_manifest,
)


def test_format_json_keeps_key_order_and_trailing_newline() -> None:
    text = format_json({"name": "@ws/app", "version": "1.0.0", "description": "é"})

    assert text == '{\n  "name": "@ws/app",\n  "version": "1.0.0",\n  "description": "é"\n}\n'


def test_write_manifest_only_writes_changes(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    data = {"name": "app", "dependencies": {"react": "~18.2.0"}}

    assert write_manifest(path, data) is True
    assert write_manifest(path, data) is False
    assert read_manifest(tmp_path) == data


def test_write_manifest_rewrites_reordered_keys(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    write_manifest(path, {"version": "1.0.0", "name": "app"})

    assert write_manifest(path, {"name": "app", "version": "1.0.0"}) is True
    assert path.read_text(encoding="utf-8").startswith('{\n  "name"')


def test_write_json_file_compares_parsed_values(tmp_path: Path) -> None:
    path = tmp_path / "tsconfig.json"
    path.write_text('{"compilerOptions": {"strict": true}}', encoding="utf-8")

    assert write_json_file(path, {"compilerOptions": {"strict": True}}) is False
    assert path.read_text(encoding="utf-8") == '{"compilerOptions": {"strict": true}}'

    assert write_json_file(path, {"compilerOptions": {"strict": False}}) is True
    assert read_json_file(path) == {"compilerOptions": {"strict": False}}


def test_read_json_file_rejects_non_objects(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        read_json_file(path)
