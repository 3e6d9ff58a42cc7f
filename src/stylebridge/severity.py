# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels understood by the external linter."""

    ERROR = "error"
    WARNING = "warning"


DEFAULT_SEVERITY: Final[Severity] = Severity.ERROR

_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "blocker": Severity.ERROR,
    "critical": Severity.ERROR,
    "major": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "minor": Severity.WARNING,
    "info": Severity.WARNING,
}


def parse_severity(label: str) -> Severity:
    """Return the severity named by ``label``.

    Raises:
        ValueError: If ``label`` is not a recognised severity name.
    """

    try:
        return _SEVERITY_ALIASES[label.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown severity {label!r}") from None


def severity_from_label(label: str | None, default: Severity = DEFAULT_SEVERITY) -> Severity:
    """Map a host or report severity label onto :class:`Severity`.

    Args:
        label: Free-form label such as ``"warning"`` or ``"MAJOR"``.
        default: Severity returned when ``label`` is empty or unrecognised.

    Returns:
        Severity: Normalised severity.
    """

    if not label:
        return default
    return _SEVERITY_ALIASES.get(label.strip().lower(), default)


__all__ = ["DEFAULT_SEVERITY", "Severity", "parse_severity", "severity_from_label"]
