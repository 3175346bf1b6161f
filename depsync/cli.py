"""CLI entrypoints for depsync commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analyzers import SourceParseError
from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .registry import VersionLookupError
from .writer import FormatterError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write debug-formatted log records to this file.",
    )


def _add_no_prettier_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-prettier",
        dest="prettier",
        action="store_false",
        default=None,
        help="Write generated files without running them through prettier.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depsync",
        description="Keep package manifests and generated sources consistent with the code.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    ensure_parser = subparsers.add_parser(
        "ensure",
        help="Reconcile package dependencies and project files across the workspace.",
    )
    _add_verbose_option(ensure_parser, suppress_default=True)
    _add_log_file_option(ensure_parser, suppress_default=True)
    _add_no_prettier_option(ensure_parser)
    ensure_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the workspace root (defaults to current directory).",
    )
    ensure_parser.add_argument(
        "--package",
        dest="packages",
        action="append",
        default=None,
        metavar="NAME",
        help="Only ensure the named package. May be repeated.",
    )
    ensure_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .depsync.yml file (defaults to the workspace root).",
    )
    ensure_parser.add_argument(
        "--ci",
        action="store_true",
        help="Exit with a non-zero status when any change was needed.",
    )

    icons_parser = subparsers.add_parser(
        "icons",
        help="Regenerate icon import tables and CSS classes for one package.",
    )
    _add_verbose_option(icons_parser, suppress_default=True)
    _add_log_file_option(icons_parser, suppress_default=True)
    _add_no_prettier_option(icons_parser)
    icons_parser.add_argument("path", help="Path to the package containing style/icons.")
    icons_parser.add_argument(
        "--dynamic",
        action="store_true",
        help="Load icons with require() calls instead of import statements.",
    )
    icons_parser.add_argument(
        "--css-prefix",
        default="jp",
        help="Prefix for generated CSS variables and classes.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for depsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "ensure":
        try:
            outcome = orchestrator.run_ensure(
                args.path,
                config_path=args.config,
                packages=args.packages,
                prettier=args.prettier,
            )
        except (ConfigError, SourceParseError, VersionLookupError, FormatterError) as exc:
            parser.exit(1, f"depsync ensure failed: {exc}\n")
        except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
            parser.exit(1, f"{exc}\n")
        for message in outcome.messages:
            print(message)
        if not outcome.changed:
            print("All packages are consistent")
        elif args.ci:
            parser.exit(1, "Packages were out of date. Commit the changes above.\n")
    elif args.command == "icons":
        try:
            messages = orchestrator.run_icons(
                args.path,
                dynamic=bool(args.dynamic),
                css_prefix=args.css_prefix,
                prettier=args.prettier is not False,
            )
        except FormatterError as exc:
            parser.exit(1, f"depsync icons failed: {exc}\n")
        for message in messages:
            print(message)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
