# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings model and layered loading from ``pyproject.toml`` and ``.stylebridge.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .filesystem import normalize_suffixes

DEFAULT_FILE_SUFFIXES: Final[tuple[str, ...]] = (".css", ".less", ".scss")
DEFAULT_INCLUDE_KEY: Final[str] = "include"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PROJECT_CONFIG_FILENAME: Final[str] = ".stylebridge.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "stylebridge"


def _split_multi_value(value: object) -> object:
    """Accept comma-separated strings where a list of values is expected."""

    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class BridgeSettings(BaseModel):
    """Runtime settings for linter execution and report import."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_suffixes: tuple[str, ...] = DEFAULT_FILE_SUFFIXES
    report_paths: tuple[Path, ...] = Field(default_factory=tuple)
    timeout: float | None = Field(default=None, ge=0)
    accept_nonzero_exit: bool = True

    @field_validator("file_suffixes", mode="before")
    @classmethod
    def _coerce_suffixes(cls, value: object) -> object:
        value = _split_multi_value(value)
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return normalize_suffixes(str(item) for item in value)
        return value

    @field_validator("report_paths", mode="before")
    @classmethod
    def _coerce_report_paths(cls, value: object) -> object:
        return _split_multi_value(value)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` recursively without mutating either.

    Args:
        base: Lower-precedence table.
        override: Higher-precedence table.

    Returns:
        dict[str, Any]: Merged table; nested tables merge, other values replace.
    """

    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


class TomlConfigSource:
    """Load a settings table from a TOML document with include support."""

    def __init__(self, path: Path, *, include_key: str = DEFAULT_INCLUDE_KEY) -> None:
        """Configure the source.

        Args:
            path: TOML document to read.
            include_key: Key listing further documents to merge first.
        """

        self._root_path = path
        self._include_key = include_key

    def load(self) -> Mapping[str, Any]:
        """Return the merged table, or an empty mapping when the file is absent."""

        return self._load(self._root_path, ())

    def _select(self, document: Mapping[str, Any]) -> Mapping[str, Any]:
        """Return the settings table of the root document."""

        return document

    def _load(self, path: Path, stack: tuple[Path, ...]) -> Mapping[str, Any]:
        """Load ``path`` and the documents it includes.

        Args:
            path: Document to read.
            stack: Documents already being loaded, used to detect cycles.

        Returns:
            Mapping[str, Any]: Included tables merged under the document itself.

        Raises:
            ConfigError: If the document is invalid or includes itself.
        """

        if not path.exists():
            return {}
        resolved = path.resolve()
        if resolved in stack:
            include_chain = " -> ".join(str(entry) for entry in (*stack, resolved))
            raise ConfigError(f"Circular include detected: {include_chain}")
        try:
            with resolved.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        section = self._select(data) if not stack else data
        if not isinstance(section, MutableMapping):
            raise ConfigError(f"Configuration at {path} must be a table")
        document: dict[str, Any] = dict(section)
        includes = document.pop(self._include_key, None)
        merged: dict[str, Any] = {}
        for include_path in self._coerce_includes(includes, resolved.parent):
            merged = _deep_merge(merged, self._load(include_path, (*stack, resolved)))
        return _deep_merge(merged, document)

    @staticmethod
    def _coerce_includes(raw: Any, base_dir: Path) -> list[Path]:
        """Return include targets, anchoring relative entries at ``base_dir``.

        Raises:
            ConfigError: If ``raw`` is neither a string nor a list.
        """

        if raw is None:
            return []
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            raise ConfigError(f"Unsupported include declaration: {raw!r}")
        return [Path(item) if Path(item).is_absolute() else base_dir / item for item in raw]


class PyProjectConfigSource(TomlConfigSource):
    """Read settings from ``[tool.stylebridge]`` within ``pyproject.toml``."""

    def _select(self, document: Mapping[str, Any]) -> Mapping[str, Any]:
        """Return ``[tool.stylebridge]`` or an empty table."""

        tool_section = document.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        return section if isinstance(section, Mapping) else {}


def load_settings(project_root: Path, *, overrides: Mapping[str, Any] | None = None) -> BridgeSettings:
    """Resolve settings for ``project_root``.

    Sources are applied in order: built-in defaults, ``[tool.stylebridge]`` in
    ``pyproject.toml``, ``.stylebridge.toml``, then ``overrides``. Relative
    report paths are anchored at ``project_root``.

    Args:
        project_root: Directory containing the configuration files.
        overrides: Explicit values taking precedence over every file.

    Returns:
        BridgeSettings: Validated settings.

    Raises:
        ConfigError: If a document is invalid or a value fails validation.
    """

    merged: dict[str, Any] = {}
    for source in (
        PyProjectConfigSource(project_root / PYPROJECT_FILENAME),
        TomlConfigSource(project_root / PROJECT_CONFIG_FILENAME),
    ):
        merged = _deep_merge(merged, source.load())
    if overrides:
        merged = _deep_merge(merged, overrides)
    try:
        settings = BridgeSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid stylebridge settings: {exc}") from exc
    anchored = tuple(path if path.is_absolute() else (project_root / path) for path in settings.report_paths)
    return settings.model_copy(update={"report_paths": anchored})


__all__ = [
    "BridgeSettings",
    "DEFAULT_FILE_SUFFIXES",
    "PROJECT_CONFIG_FILENAME",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_settings",
]
