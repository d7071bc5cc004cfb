"""
linegrep: search files, directories, and standard input for lines matching a
regular expression.
"""

from linegrep.errors import (
    ConfigError,
    DirectoryNotRecursive,
    LinegrepError,
    NotFound,
    OpenFailed,
    PathResolutionError,
    PatternError,
    ReadFailed,
)
from linegrep.file_resolver import NamedFile, StandardInput, resolve
from linegrep.matcher import CompiledPattern, compile_pattern, match_lines

__all__ = [
    "CompiledPattern",
    "ConfigError",
    "DirectoryNotRecursive",
    "LinegrepError",
    "NamedFile",
    "NotFound",
    "OpenFailed",
    "PathResolutionError",
    "PatternError",
    "ReadFailed",
    "StandardInput",
    "compile_pattern",
    "match_lines",
    "resolve",
]
