"""
Path resolution for linegrep: expands files, directories, and the stdin
marker `-` into an ordered list of search targets and per-path errors.

Usage::

    from linegrep.file_resolver import resolve, NamedFile

    for entry in resolve(["notes.txt", "docs/", "-"], recursive=True):
        ...
"""

from linegrep.file_resolver.resolver import FileResolver, resolve
from linegrep.file_resolver.types import (
    STDIN_SENTINEL,
    NamedFile,
    ResolvedEntry,
    ResolverConfig,
    StandardInput,
    Target,
)

__all__ = [
    "STDIN_SENTINEL",
    "FileResolver",
    "NamedFile",
    "ResolvedEntry",
    "ResolverConfig",
    "StandardInput",
    "Target",
    "resolve",
]
