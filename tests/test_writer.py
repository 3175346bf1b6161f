"""Tests for idempotent file writing and formatting."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from depsync import writer
from depsync.writer import (
    FormatterError,
    NullFormatter,
    PrettierFormatter,
    display_path,
    ensure_file,
)


def test_ensure_file_requires_existing_target(tmp_path: Path) -> None:
    target = tmp_path / "missing.ts"

    messages = ensure_file(target, "export {};\n", formatter=NullFormatter())

    assert messages == [
        f"Tried to ensure the contents of {target}, but the file does not exist"
    ]
    assert not target.exists()


def test_ensure_file_updates_once(tmp_path: Path) -> None:
    target = tmp_path / "index.ts"
    target.write_text("", encoding="utf-8")

    first = ensure_file(target, "export {};\n", formatter=NullFormatter())
    second = ensure_file(target, "export {};\n", formatter=NullFormatter())

    assert first == [f"Updated {target}"]
    assert second == []
    assert target.read_text(encoding="utf-8") == "export {};\n"


def test_ensure_file_preserves_crlf_line_endings(tmp_path: Path) -> None:
    target = tmp_path / "index.css"
    target.write_bytes(b"a {}\r\nb {}\r\n")

    assert ensure_file(target, "a {}\nb {}\n", prettify=False) == []

    ensure_file(target, "a {}\nc {}\n", prettify=False)
    assert target.read_bytes() == b"a {}\r\nc {}\r\n"


def test_ensure_file_runs_formatter_when_prettifying(tmp_path: Path) -> None:
    target = tmp_path / "index.ts"
    target.write_text("", encoding="utf-8")
    calls = []

    def runner(args, *, input, cwd):
        calls.append((list(args), input, cwd))
        return input.replace('"', "'")

    formatter = PrettierFormatter(runner=runner)
    ensure_file(target, 'import x from "x";\n', formatter=formatter)

    assert calls == [
        (
            ["prettier", "--stdin-filepath", str(target), "--single-quote"],
            'import x from "x";\n',
            tmp_path,
        )
    ]
    assert target.read_text(encoding="utf-8") == "import x from 'x';\n"


def test_ensure_file_skips_formatter_without_prettify(tmp_path: Path) -> None:
    target = tmp_path / "index.css"
    target.write_text("", encoding="utf-8")

    def runner(args, *, input, cwd):
        raise AssertionError("formatter should not run")

    ensure_file(target, "a {}\n", prettify=False, formatter=PrettierFormatter(runner=runner))

    assert target.read_text(encoding="utf-8") == "a {}\n"


def test_prettier_formatter_reports_missing_executable(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fake_run(*args, **kwargs):
        raise FileNotFoundError("prettier")

    monkeypatch.setattr(writer.subprocess, "run", fake_run)

    with pytest.raises(FormatterError, match="--no-prettier"):
        PrettierFormatter().format("x", tmp_path / "index.ts")


def test_prettier_formatter_reports_failures(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fake_run(args, **kwargs):
        raise subprocess.CalledProcessError(2, args, output="", stderr="SyntaxError\n")

    monkeypatch.setattr(writer.subprocess, "run", fake_run)

    with pytest.raises(FormatterError, match="exit code 2: SyntaxError"):
        PrettierFormatter().format("x", tmp_path / "index.ts")


def test_display_path_marks_relative_paths() -> None:
    assert display_path(Path("packages/app/tsconfig.json")) == "./packages/app/tsconfig.json"
    assert display_path(Path("/ws/tsconfig.json")) == "/ws/tsconfig.json"
