"""
Line matching against a compiled regular expression.

Lines are read one at a time with their terminators intact, so `\n`, `\r\n`,
and a final unterminated line all come back exactly as they appeared in the
input.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import IO, AnyStr

from linegrep.errors import PatternError, ReadFailed


@dataclass(frozen=True)
class CompiledPattern:
    """
    A regular expression compiled once, with case sensitivity fixed at
    construction time.
    """

    source: str
    insensitive: bool = False
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.IGNORECASE if self.insensitive else 0
        try:
            regex = re.compile(self.source, flags)
        except re.error as e:
            raise PatternError(self.source, e) from e
        object.__setattr__(self, "regex", regex)

    def is_match(self, line: str) -> bool:
        """True if the pattern matches anywhere in `line`."""
        return self.regex.search(line) is not None


def compile_pattern(pattern: str, insensitive: bool = False) -> CompiledPattern:
    """
    Compile `pattern`, raising `PatternError` if it is not a valid regular
    expression.
    """
    return CompiledPattern(pattern, insensitive)


def _decode(line: AnyStr) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8")
    return line


def iter_lines(stream: IO[bytes] | IO[str]) -> Iterator[str]:
    """
    Yield lines from `stream` until end of input, each with its original
    terminator. Binary streams are decoded as strict UTF-8.
    """
    while True:
        raw = stream.readline()
        if not raw:
            return
        yield _decode(raw)


def match_lines(
    stream: IO[bytes] | IO[str], pattern: CompiledPattern, invert: bool = False
) -> list[str]:
    """
    Return the lines of `stream` whose match status differs from `invert`.

    An I/O or decoding failure raises `ReadFailed` and no lines are returned
    for the stream.
    """
    selected: list[str] = []
    try:
        for line in iter_lines(stream):
            if pattern.is_match(line) != invert:
                selected.append(line)
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailed(e) from e
    return selected


def count_matches(
    stream: IO[bytes] | IO[str], pattern: CompiledPattern, invert: bool = False
) -> int:
    return len(match_lines(stream, pattern, invert))
