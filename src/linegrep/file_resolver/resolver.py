"""
FileResolver: turns user-supplied paths into search targets.

Each input path produces its entries in input order. Directory walks yield
files in filesystem order, which is not sorted.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator, Sequence
from pathlib import Path

import pathspec

from linegrep.errors import DirectoryNotRecursive, NotFound
from linegrep.file_resolver.gitignore import load_gitignore, load_tool_ignore
from linegrep.file_resolver.types import (
    STDIN_SENTINEL,
    NamedFile,
    ResolvedEntry,
    ResolverConfig,
    StandardInput,
)


def _skip_walk_error(_error: OSError) -> None:
    """Unreadable subdirectories are skipped; the rest of the walk continues."""


def _is_regular_file(path: str) -> bool:
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError:
        return False


class FileResolver:
    """
    Resolves paths into `StandardInput`, `NamedFile`, or error entries,
    applying the recursion policy and any configured exclusions.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self._config: ResolverConfig = config if config is not None else ResolverConfig()
        self._exclude_spec: pathspec.PathSpec | None = (
            pathspec.PathSpec.from_lines("gitignore", self._config.exclude)
            if self._config.exclude
            else None
        )
        # Cache gitignore specs per directory to avoid re-reading from disk.
        self._gitignore_cache: dict[str, pathspec.PathSpec | None] = {}

    def resolve(self, paths: Sequence[str], recursive: bool = False) -> list[ResolvedEntry]:
        """
        Resolve each path in order:
        - `-` → `StandardInput()`
        - unreadable metadata → `NotFound`
        - directory → `DirectoryNotRecursive`, or every regular file beneath it
          when `recursive` is set
        - regular file → `NamedFile` with the path unchanged
        - any other file type → nothing
        """
        entries: list[ResolvedEntry] = []
        for path in paths:
            if path == STDIN_SENTINEL:
                entries.append(StandardInput())
                continue

            # Embedded NUL bytes raise ValueError rather than OSError.
            try:
                mode = os.stat(path).st_mode
            except (OSError, ValueError) as e:
                entries.append(NotFound(path, e))
                continue

            if stat.S_ISDIR(mode):
                if recursive:
                    entries.extend(NamedFile(found) for found in self._walk_directory(path))
                else:
                    entries.append(DirectoryNotRecursive(path))
            elif stat.S_ISREG(mode):
                entries.append(NamedFile(path))
        return entries

    def _walk_directory(self, root: str) -> Iterator[str]:
        """
        Yield every regular file under `root`. Symlinks are neither followed
        nor yielded. Entries that cannot be read are skipped.
        """
        tool_ignore: tuple[str, pathspec.PathSpec] | None = None
        if self._config.respect_gitignore:
            found = load_tool_ignore(self._config.tool_name, Path(root))
            if found is not None:
                ignore_dir, spec = found
                # Walk-root location relative to the ignore file's directory
                prefix = os.path.relpath(os.path.realpath(root), ignore_dir)
                tool_ignore = ("" if prefix == os.curdir else prefix, spec)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_skip_walk_error):
            rel_dir = os.path.relpath(dirpath, root)
            rel_dir = "" if rel_dir == os.curdir else rel_dir

            ignore_chain: list[tuple[str, pathspec.PathSpec]] = []
            if self._config.respect_gitignore:
                ignore_chain = self._get_gitignore_chain(root, rel_dir)

            # Prune excluded directories in-place (prevents descent)
            dirnames[:] = [
                d
                for d in dirnames
                if not self._is_ignored(
                    os.path.join(rel_dir, d) + "/", ignore_chain, tool_ignore
                )
            ]

            for filename in filenames:
                if self._is_ignored(os.path.join(rel_dir, filename), ignore_chain, tool_ignore):
                    continue
                filepath = os.path.join(dirpath, filename)
                if _is_regular_file(filepath):
                    yield filepath

    def _is_ignored(
        self,
        rel_path: str,
        ignore_chain: list[tuple[str, pathspec.PathSpec]],
        tool_ignore: tuple[str, pathspec.PathSpec] | None = None,
    ) -> bool:
        """
        Check a walk-root-relative path against exclusions and ignore specs.

        Gitignore specs in `ignore_chain` sit at or below the walk root, so
        their base directory is stripped from `rel_path`. The tool ignore file
        may sit above the walk root, so its prefix is prepended instead.
        """
        if self._exclude_spec is not None and self._exclude_spec.match_file(rel_path):
            return True
        for base, spec in ignore_chain:
            local = rel_path[len(base) + 1 :] if base else rel_path
            if spec.match_file(local):
                return True
        if tool_ignore is not None:
            prefix, spec = tool_ignore
            if spec.match_file(os.path.join(prefix, rel_path) if prefix else rel_path):
                return True
        return False

    def _get_gitignore(self, directory: str) -> pathspec.PathSpec | None:
        """Load and cache gitignore for a directory."""
        if directory not in self._gitignore_cache:
            self._gitignore_cache[directory] = load_gitignore(Path(directory))
        return self._gitignore_cache[directory]

    def _get_gitignore_chain(
        self, root: str, rel_dir: str
    ) -> list[tuple[str, pathspec.PathSpec]]:
        """Collect gitignore specs from the walk root down to `rel_dir` (inclusive)."""
        chain: list[tuple[str, pathspec.PathSpec]] = []
        parts = rel_dir.split(os.sep) if rel_dir else []
        for depth in range(len(parts) + 1):
            base = os.path.join(*parts[:depth]) if depth else ""
            spec = self._get_gitignore(os.path.join(root, base))
            if spec is not None:
                chain.append((base, spec))
        return chain


def resolve(
    paths: Sequence[str], recursive: bool = False, config: ResolverConfig | None = None
) -> list[ResolvedEntry]:
    """Resolve `paths` into search targets and per-path errors, in order."""
    return FileResolver(config).resolve(paths, recursive)
