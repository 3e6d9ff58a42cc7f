# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Index of the source files tracked by the host analysis."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .models import InputFile

EXCLUDED_DIRECTORIES: Final[frozenset[str]] = frozenset({"node_modules", "__pycache__"})

_LANGUAGE_BY_SUFFIX: Final[dict[str, str]] = {
    ".css": "css",
    ".less": "less",
    ".scss": "scss",
    ".sass": "sass",
}


@runtime_checkable
class FileIndex(Protocol):
    """Lookup of tracked files by absolute path."""

    def get(self, absolute_path: str) -> InputFile | None:
        """Return the tracked file at ``absolute_path`` or ``None``."""


def normalize_suffixes(suffixes: Iterable[str]) -> tuple[str, ...]:
    """Return lower-cased suffixes that all start with a dot, without duplicates.

    Args:
        suffixes: Raw suffix entries such as ``"css"`` or ``".SCSS"``.

    Returns:
        tuple[str, ...]: Normalised suffixes in first-seen order.
    """

    seen: dict[str, None] = {}
    for raw in suffixes:
        value = raw.strip().lower()
        if not value:
            continue
        if not value.startswith("."):
            value = f".{value}"
        seen.setdefault(value, None)
    return tuple(seen)


def _path_key(path: Path | str) -> str:
    return str(Path(path))


class InputFileIndex:
    """Exact absolute-path index over :class:`InputFile` handles."""

    __slots__ = ("_files",)

    def __init__(self, files: Iterable[InputFile] = ()) -> None:
        """Index ``files`` by their absolute path.

        Args:
            files: Tracked file handles.
        """

        self._files: dict[str, InputFile] = {_path_key(item.path): item for item in files}

    @classmethod
    def from_paths(cls, paths: Iterable[Path | str]) -> InputFileIndex:
        """Build an index from absolute file paths.

        Raises:
            ValueError: If a path is relative.
        """

        return cls(
            InputFile(path=Path(path), language=_LANGUAGE_BY_SUFFIX.get(Path(path).suffix.lower()))
            for path in paths
        )

    @classmethod
    def discover(cls, root: Path, suffixes: Sequence[str]) -> InputFileIndex:
        """Index files under ``root`` whose suffix is listed in ``suffixes``.

        Hidden directories and :data:`EXCLUDED_DIRECTORIES` are not descended into.

        Args:
            root: Directory to walk.
            suffixes: Accepted file suffixes, e.g. ``(".css", ".scss")``.

        Returns:
            InputFileIndex: Index of the discovered files.
        """

        accepted = frozenset(normalize_suffixes(suffixes))
        base = root.resolve()
        found: list[Path] = []
        for current, dirnames, filenames in os.walk(base):
            dirnames[:] = sorted(
                name for name in dirnames if not name.startswith(".") and name not in EXCLUDED_DIRECTORIES
            )
            for filename in sorted(filenames):
                if Path(filename).suffix.lower() in accepted:
                    found.append(Path(current) / filename)
        return cls.from_paths(found)

    def get(self, absolute_path: str) -> InputFile | None:
        """Return the file registered under ``absolute_path``.

        The lookup matches the absolute path exactly after the same lexical
        normalisation applied at registration (redundant ``.`` segments and
        separators collapse; ``..`` is kept).

        Args:
            absolute_path: Path string as reported by the linter.

        Returns:
            InputFile | None: Matching file, or ``None`` when it is not tracked.
        """

        return self._files.get(_path_key(absolute_path))

    def __contains__(self, absolute_path: object) -> bool:
        if not isinstance(absolute_path, (str, Path)):
            return False
        return _path_key(absolute_path) in self._files

    def __iter__(self) -> Iterator[InputFile]:
        return iter(self._files.values())

    def __len__(self) -> int:
        return len(self._files)


__all__ = ["EXCLUDED_DIRECTORIES", "FileIndex", "InputFileIndex", "normalize_suffixes"]
