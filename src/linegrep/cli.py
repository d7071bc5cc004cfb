#!/usr/bin/env python3
"""
linegrep: Search files for lines matching a regular expression

Common usage:
  linegrep 'TODO' notes.txt
  linegrep -i 'error' app.log other.log
  linegrep -rc 'import re' src/
  cat notes.txt | linegrep -v '^#'

With more than one input, each output line is prefixed with its file name.
Use `-` to read standard input (the default when no files are given).

Exit status is 0 if any line was selected, 1 if none was, and 2 if the
pattern was invalid or any input could not be read.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from linegrep.config import find_config_file, load_config, merge_cli_with_config
from linegrep.errors import ConfigError, PatternError
from linegrep.file_resolver import STDIN_SENTINEL, ResolverConfig, resolve
from linegrep.matcher import compile_pattern
from linegrep.search import SearchOptions, report_error, search

EXIT_MATCHED = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2


@dataclass
class Options:
    """Command-line options for the linegrep tool."""

    pattern: str
    files: list[str]
    insensitive: bool
    recursive: bool
    count: bool
    invert: bool
    # File discovery options
    exclude: list[str]
    respect_gitignore: bool
    no_config: bool


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="linegrep",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("pattern", type=str, help="Regular expression to search for")
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[STDIN_SENTINEL],
        help="Input files or directories (default: '-' for stdin)",
    )
    parser.add_argument(
        "-i", "--insensitive", action="store_true", help="Case-insensitive matching"
    )
    parser.add_argument(
        "-r", "--recursive", action="store_true", help="Search directories recursively"
    )
    parser.add_argument(
        "-c", "--count", action="store_true", help="Print a count of selected lines per file"
    )
    parser.add_argument(
        "-v",
        "--invert-match",
        action="store_true",
        dest="invert",
        help="Select lines that do not match the pattern",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip paths matching this gitignore-style pattern during recursive "
        "searches (e.g., '*.log', 'build/'). Can be repeated",
    )
    parser.add_argument(
        "--respect-gitignore",
        action="store_true",
        dest="respect_gitignore",
        help="Skip files ignored by .gitignore or .linegrepignore during recursive searches",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        dest="no_config",
        help="Do not read .linegrep.toml, linegrep.toml, or pyproject.toml settings",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s v{_package_version()}",
    )
    return parser


def _package_version() -> str:
    try:
        return importlib.metadata.version("linegrep")
    except importlib.metadata.PackageNotFoundError:
        return "unknown (package not installed)"


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`, where `explicit_flags` names the
    settings the user passed on the command line (these win over config).
    """
    opts = _build_parser().parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("-i", "--insensitive", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("-r", "--recursive", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("-c", "--count", action="store_true")
    sentinel_parser.add_argument("-v", "--invert-match", action="store_true")
    sentinel_parser.add_argument("--exclude", action="append", default=None)
    sentinel_parser.add_argument(
        "--respect-gitignore", dest="respect_gitignore", action="store_true", default=_SENTINEL
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for name in ("insensitive", "recursive", "respect_gitignore"):
        if getattr(sentinel_opts, name) is not _SENTINEL:
            explicit_flags.add(name)
    if sentinel_opts.exclude is not None:
        explicit_flags.add("exclude")

    return (
        Options(
            pattern=opts.pattern,
            files=opts.files,
            insensitive=opts.insensitive,
            recursive=opts.recursive,
            count=opts.count,
            invert=opts.invert,
            exclude=opts.exclude,
            respect_gitignore=opts.respect_gitignore,
            no_config=opts.no_config,
        ),
        explicit_flags,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the linegrep CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code: 0 if any line was selected, 1 if none, 2 on errors
    """
    options, explicit_flags = _parse_args(args)

    if not options.no_config:
        config_path = find_config_file(Path.cwd())
        if config_path:
            try:
                config = load_config(config_path)
            except ConfigError as e:
                report_error(sys.stderr, e)
                return EXIT_ERROR
            merge_cli_with_config(options, config, explicit_flags)

    # The pattern is compiled before any path is touched.
    try:
        pattern = compile_pattern(options.pattern, options.insensitive)
    except PatternError as e:
        report_error(sys.stderr, e)
        return EXIT_ERROR

    entries = resolve(
        options.files,
        recursive=options.recursive,
        config=ResolverConfig(
            exclude=options.exclude,
            respect_gitignore=options.respect_gitignore,
        ),
    )
    summary = search(
        entries,
        pattern,
        SearchOptions(count=options.count, invert=options.invert),
    )

    if summary.errors:
        return EXIT_ERROR
    return EXIT_MATCHED if summary.selected_lines else EXIT_NO_MATCH


if __name__ == "__main__":
    sys.exit(main())
