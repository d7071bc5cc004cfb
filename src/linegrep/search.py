"""
Runs the matcher over resolved targets and writes results.

Targets are processed one at a time, in order. A failure on one target is
reported and the next target is still searched.
"""

from __future__ import annotations

import errno
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import IO, TextIO

from linegrep.errors import LinegrepError, OpenFailed, PathResolutionError, ReadFailed
from linegrep.file_resolver import NamedFile, ResolvedEntry, StandardInput, Target
from linegrep.matcher import CompiledPattern, match_lines

PROG_NAME = "linegrep"


@dataclass
class SearchOptions:
    count: bool = False
    invert: bool = False


@dataclass
class SearchSummary:
    """Totals across one run, used to pick the exit status."""

    targets: int = 0
    selected_lines: int = 0
    errors: int = 0


@contextmanager
def open_target(target: Target) -> Iterator[IO[bytes]]:
    """
    Open a target for binary reading. Standard input is yielded but left
    open; named files are closed when the block exits.
    """
    if isinstance(target, StandardInput):
        # Detached processes may have no stdin at all.
        if sys.stdin is None:
            raise OpenFailed(
                target.display_name, OSError(errno.EBADF, "standard input is not available")
            )
        yield sys.stdin.buffer
        return
    try:
        stream = open(target.path, "rb")
    except OSError as e:
        raise OpenFailed(target.path, e) from e
    with stream:
        yield stream


def report_error(err: TextIO, error: LinegrepError) -> None:
    print(f"{PROG_NAME}: {error}", file=err)


def search_target(target: Target, pattern: CompiledPattern, invert: bool) -> list[str]:
    """Open and match a single target, raising `OpenFailed` or `ReadFailed`."""
    with open_target(target) as stream:
        try:
            return match_lines(stream, pattern, invert)
        except ReadFailed as e:
            raise e.for_path(target.display_name) from e.cause


def search(
    entries: Sequence[ResolvedEntry],
    pattern: CompiledPattern,
    options: SearchOptions,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> SearchSummary:
    """
    Search every target in `entries` and write matches (or counts) to `out`.
    Error entries and per-target failures are reported to `err`.

    Output lines are prefixed with `<name>:` when more than one target is
    being searched.
    """
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr

    summary = SearchSummary()
    targets = [e for e in entries if isinstance(e, (StandardInput, NamedFile))]
    show_names = len(targets) > 1

    for entry in entries:
        if isinstance(entry, PathResolutionError):
            report_error(err, entry)
            summary.errors += 1
            continue

        summary.targets += 1
        try:
            lines = search_target(entry, pattern, options.invert)
        except (OpenFailed, ReadFailed) as e:
            report_error(err, e)
            summary.errors += 1
            continue

        summary.selected_lines += len(lines)
        prefix = f"{entry.display_name}:" if show_names else ""
        if options.count:
            out.write(f"{prefix}{len(lines)}\n")
        else:
            for line in lines:
                out.write(f"{prefix}{line}")

    return summary
