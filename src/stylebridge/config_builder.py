# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Materialise the active rule set as a stylelint configuration document."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Final

from .models import LinterConfig, RuleDescriptor, RuleSettings
from .severity import DEFAULT_SEVERITY

LOGGER = logging.getLogger(__name__)

RULES_KEY: Final[str] = "rules"
SEVERITY_OPTION: Final[str] = "severity"
CONFIG_ENCODING: Final[str] = "utf-8"


def build(rules: Iterable[RuleDescriptor]) -> LinterConfig:
    """Return the linter configuration enabling exactly ``rules``.

    Args:
        rules: Active rule descriptors for the run.

    Returns:
        LinterConfig: Immutable configuration keyed by external rule id.
    """

    settings = {
        descriptor.external_id: RuleSettings(
            enabled=True,
            options=descriptor.options,
            severity=descriptor.severity,
        )
        for descriptor in sorted(rules, key=lambda descriptor: descriptor.external_id)
    }
    return LinterConfig(rules=settings)


def _rule_value(settings: RuleSettings) -> Any:
    """Return the stylelint value for one rule: ``true``, ``null`` or ``[true, {...}]``."""

    if not settings.enabled:
        return None
    secondary: dict[str, Any] = dict(settings.options)
    if settings.severity is not DEFAULT_SEVERITY:
        secondary[SEVERITY_OPTION] = settings.severity.value
    if not secondary:
        return True
    return [True, secondary]


def to_document(config: LinterConfig) -> dict[str, Any]:
    """Return the JSON-ready stylelint document for ``config``."""

    return {RULES_KEY: {external_id: _rule_value(settings) for external_id, settings in config.rules.items()}}


def serialize(config: LinterConfig) -> bytes:
    """Serialise ``config`` to bytes in the stylelint configuration format.

    The output is independent of the order in which rules were supplied:
    keys are sorted and separators are compact.

    Args:
        config: Configuration produced by :func:`build`.

    Returns:
        bytes: UTF-8 encoded JSON document terminated by a newline.
    """

    text = json.dumps(to_document(config), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"{text}\n".encode(CONFIG_ENCODING)


def write_config(config: LinterConfig, path: Path) -> Path:
    """Write ``config`` to ``path`` and return the written location.

    Args:
        config: Configuration to serialise.
        path: Destination referenced by the linter command.

    Returns:
        Path: The path that was written.

    Raises:
        OSError: If the directory cannot be created or the file cannot be written.
    """

    payload = serialize(config)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        handle.write(payload)
    LOGGER.debug("wrote stylelint config with %d rule(s) to %s", len(config), path)
    return path


__all__ = ["RULES_KEY", "build", "serialize", "to_document", "write_config"]
