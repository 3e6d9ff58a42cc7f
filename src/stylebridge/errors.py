# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while running the external linter and reconciling its report."""

from __future__ import annotations

from collections.abc import Sequence


class ConfigError(Exception):
    """Raised when configuration or rule activation input is invalid."""


class StylebridgeError(RuntimeError):
    """Base class for errors that abort an analysis run."""


class ProcessLaunchError(StylebridgeError):
    """Raised when the external linter process cannot be started."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        """Initialise the error with the attempted command.

        Args:
            command: Argument vector that failed to launch.
            reason: Short description of the launch failure.
        """

        self.command = tuple(command)
        self.reason = reason
        super().__init__(f"Failed to run external process '{' '.join(self.command)}': {reason}")


class ProcessExecutionError(StylebridgeError):
    """Raised when the linter exits abnormally without a usable report."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: str | None = None,
        *,
        detail: str | None = None,
    ) -> None:
        """Initialise the error with captured process metadata.

        Args:
            command: Argument vector that was executed.
            returncode: Exit status reported by the process.
            stderr: Captured standard error stream, when available.
            detail: Optional explanation appended to the message.
        """

        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        message = (
            f"External process '{' '.join(self.command)}' exited with status {returncode}. "
            f"stderr: {stderr.strip() if stderr and stderr.strip() else '<none>'}"
        )
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ReportFormatError(StylebridgeError):
    """Raised when the linter report does not match the expected structure."""

    def __init__(self, reason: str, *, location: str = "", fragment: str = "") -> None:
        """Initialise the error with the malformed location.

        Args:
            reason: Description of the structural problem.
            location: Path into the report document, e.g. ``[0].warnings[1].line``.
            fragment: Excerpt of the offending input.
        """

        self.reason = reason
        self.location = location
        self.fragment = fragment
        parts = [f"Malformed linter report: {reason}"]
        if location:
            parts.append(f"at {location}")
        if fragment:
            parts.append(f"near {fragment!r}")
        super().__init__(" ".join(parts))


class UnknownRuleError(StylebridgeError):
    """Raised when a finding references a rule that is unknown or not enabled."""

    def __init__(self, rule_id: str) -> None:
        """Initialise the error with the offending rule.

        Args:
            rule_id: External rule identifier found in the report.
        """

        self.rule_id = rule_id
        super().__init__(f"Unknown stylelint rule or rule not enabled: {rule_id}")


__all__ = [
    "ConfigError",
    "ProcessExecutionError",
    "ProcessLaunchError",
    "ReportFormatError",
    "StylebridgeError",
    "UnknownRuleError",
]
