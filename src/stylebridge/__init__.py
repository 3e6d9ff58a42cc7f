# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run stylelint as an external process and reconcile its findings with host rules and files."""

from __future__ import annotations

from importlib import metadata

from .config import BridgeSettings, load_settings
from .errors import (
    ConfigError,
    ProcessExecutionError,
    ProcessLaunchError,
    ReportFormatError,
    StylebridgeError,
    UnknownRuleError,
)
from .filesystem import FileIndex, InputFileIndex
from .models import InputFile, NormalizedIssue, RuleDescriptor, RuleKey
from .orchestrator import CommandTemplate, Orchestrator
from .rules import BUILTIN_CATALOG, NOT_FOUND, RuleRegistry

try:
    __version__ = metadata.version("stylebridge")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "BUILTIN_CATALOG",
    "BridgeSettings",
    "CommandTemplate",
    "ConfigError",
    "FileIndex",
    "InputFile",
    "InputFileIndex",
    "NOT_FOUND",
    "NormalizedIssue",
    "Orchestrator",
    "ProcessExecutionError",
    "ProcessLaunchError",
    "ReportFormatError",
    "RuleDescriptor",
    "RuleKey",
    "RuleRegistry",
    "StylebridgeError",
    "UnknownRuleError",
    "__version__",
    "load_settings",
]
