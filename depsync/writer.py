"""Idempotent writing of generated files."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Protocol

from .logging import get_logger

logger = get_logger("writer")


class FormatterError(RuntimeError):
    """Raised when the source formatter fails."""


class SourceFormatter(Protocol):
    def format(self, content: str, path: Path) -> str:
        """Return ``content`` formatted as appropriate for ``path``."""


class NullFormatter:
    """Formatter that leaves content untouched."""

    def format(self, content: str, path: Path) -> str:
        return content


class PrettierFormatter:
    """Formats content by piping it through the ``prettier`` executable."""

    def __init__(
        self,
        executable: str = "prettier",
        *,
        single_quote: bool = True,
        runner: Callable[..., str] | None = None,
    ) -> None:
        self.executable = executable
        self.single_quote = single_quote
        self._runner = runner or self._default_runner

    def format(self, content: str, path: Path) -> str:
        args = [self.executable, "--stdin-filepath", str(path)]
        if self.single_quote:
            args.append("--single-quote")
        return self._runner(args, input=content, cwd=path.parent)

    @staticmethod
    def _default_runner(args: Iterable[str], *, input: str, cwd: Path) -> str:
        args = list(args)
        try:
            completed = subprocess.run(
                args,
                cwd=str(cwd),
                input=input,
                check=True,
                text=True,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            raise FormatterError(
                f"Unable to locate '{args[0]}'. Install prettier or run with --no-prettier."
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise FormatterError(
                f"prettier failed with exit code {exc.returncode}: {exc.stderr.strip()}"
            ) from exc
        return completed.stdout


def ensure_file(
    path: Path,
    contents: str,
    *,
    prettify: bool = True,
    formatter: SourceFormatter | None = None,
) -> List[str]:
    """Make the file at ``path`` hold ``contents``.

    The file must already exist. Returns an empty list when nothing changed,
    otherwise a single message describing the update or the missing file.
    """
    if not path.exists():
        return [f"Tried to ensure the contents of {path}, but the file does not exist"]

    formatted = contents
    if prettify:
        formatted = (formatter or PrettierFormatter()).format(contents, path)

    previous = path.read_bytes().decode("utf-8")
    if "\r" in previous:
        formatted = formatted.replace("\r\n", "\n").replace("\n", "\r\n")
    if previous == formatted:
        return []

    path.write_bytes(formatted.encode("utf-8"))
    logger.debug("Wrote %d bytes to %s", len(formatted), path)
    return [f"Updated {display_path(path)}"]


def display_path(path: Path) -> str:
    """Render a path for messages, marking relative paths with a leading './'."""
    return str(path) if path.is_absolute() else f"./{path.as_posix()}"


__all__ = [
    "FormatterError",
    "NullFormatter",
    "PrettierFormatter",
    "SourceFormatter",
    "display_path",
    "ensure_file",
]
