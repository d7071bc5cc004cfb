"""
TOML-based config file loading for linegrep.

Searches for `.linegrep.toml`, `linegrep.toml`, or `pyproject.toml [tool.linegrep]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from linegrep.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class LinegrepConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so the merge can tell "not configured" apart from "set to the default".
    """

    # Matching
    insensitive: bool | None = None
    # File discovery
    recursive: bool | None = None
    exclude: list[str] | None = None
    respect_gitignore: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".linegrep.toml", "linegrep.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(LinegrepConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.linegrep.toml` >
    `linegrep.toml` > `pyproject.toml` (only if it has `[tool.linegrep]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename != "pyproject.toml" or _pyproject_has_linegrep_section(candidate):
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_linegrep_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "linegrep" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> LinegrepConfig:
    """
    Load a `LinegrepConfig` from a TOML file. Supports standalone
    `linegrep.toml` / `.linegrep.toml` and `pyproject.toml` (reads
    `[tool.linegrep]`). Kebab-case keys map to snake_case fields.

    Raises `ConfigError` for invalid TOML or values of the wrong type.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(config_path, f"invalid TOML: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("linegrep", {})

    config = _parse_config_data(data)
    _validate_config(config_path, config)
    return config


def _validate_config(config_path: Path, config: LinegrepConfig) -> None:
    for name in ("insensitive", "recursive", "respect_gitignore"):
        value = getattr(config, name)
        if value is not None and not isinstance(value, bool):
            raise ConfigError(config_path, f"`{name}` must be true or false, got {value!r}")
    if config.exclude is not None and not (
        isinstance(config.exclude, list) and all(isinstance(p, str) for p in config.exclude)
    ):
        raise ConfigError(
            config_path, f"`exclude` must be a list of strings, got {config.exclude!r}"
        )


def _parse_config_data(data: dict[str, Any]) -> LinegrepConfig:
    """Parse a flat or sectioned TOML dict into LinegrepConfig."""
    # Flatten sections: [search] and [file-discovery] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(cast(dict[str, Any], value))
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value

    return LinegrepConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: LinegrepConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(LinegrepConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
