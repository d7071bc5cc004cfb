"""Search targets and configuration types for path resolution."""

from __future__ import annotations

from dataclasses import dataclass, field

from linegrep.errors import PathResolutionError

STDIN_SENTINEL = "-"


@dataclass(frozen=True)
class StandardInput:
    """Read from the process's standard input."""

    @property
    def display_name(self) -> str:
        return "(standard input)"


@dataclass(frozen=True)
class NamedFile:
    """A regular file on disk, with the path kept exactly as the user (or walk) gave it."""

    path: str

    @property
    def display_name(self) -> str:
        return self.path


Target = StandardInput | NamedFile

ResolvedEntry = Target | PathResolutionError


@dataclass
class ResolverConfig:
    """
    Configuration for recursive directory walks.

    `exclude` holds gitignore-style patterns pruned during walks; explicitly
    named paths are never filtered. `respect_gitignore` additionally applies
    `.gitignore` files inside walked trees and the nearest `.{tool_name}ignore`
    at or above each walk root.
    """

    tool_name: str = "linegrep"
    exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = False
