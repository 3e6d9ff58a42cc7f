# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Destinations for reconciled and imported issues."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Protocol, TypeAlias, runtime_checkable

from rich.console import Console
from rich.text import Text

from .logging import Tone, detect_tty, get_console, section, status
from .models import ExternalIssue, NormalizedIssue
from .severity import Severity

ReportedIssue: TypeAlias = NormalizedIssue | ExternalIssue


@runtime_checkable
class IssueSink(Protocol):
    """Host issue-reporting API: receives one call per issue."""

    def save(self, issue: ReportedIssue) -> None:
        """Persist or display ``issue``."""


class CollectingIssueSink:
    """Keep saved issues in memory."""

    def __init__(self) -> None:
        self.issues: list[ReportedIssue] = []

    def save(self, issue: ReportedIssue) -> None:
        """Append ``issue`` to :attr:`issues`."""

        self.issues.append(issue)


def rule_label(issue: ReportedIssue) -> str:
    """Return the rule reference displayed for ``issue``."""

    if isinstance(issue, NormalizedIssue):
        return str(issue.rule_key)
    return f"external_{issue.engine}:{issue.rule_id}"


def format_issue(issue: ReportedIssue) -> str:
    """Render ``issue`` as ``path:line [rule] message``."""

    return f"{issue.file}:{issue.line} [{rule_label(issue)}] {issue.message}"


class ConsoleIssueSink:
    """Print issues to a Rich console as they are saved."""

    def __init__(self, console: Console | None = None, *, use_color: bool | None = None) -> None:
        """Configure the sink.

        Args:
            console: Console to print to; a shared console when ``None``.
            use_color: Optional explicit colour flag overriding TTY detection.
        """

        color = detect_tty() if use_color is None else use_color
        self._console = console or get_console(color=color, emoji=False)
        self._use_color = color
        self.count = 0

    def save(self, issue: ReportedIssue) -> None:
        """Print ``issue``, in red for external errors and yellow otherwise.

        Args:
            issue: Issue to display.
        """

        text = Text(format_issue(issue))
        if self._use_color:
            severe = isinstance(issue, ExternalIssue) and issue.severity is Severity.ERROR
            text.stylize("red" if severe else "yellow")
        self._console.print(text)
        self.count += 1


def print_summary(
    issues: Sequence[ReportedIssue],
    *,
    title: str = "stylelint",
    use_emoji: bool = True,
    use_color: bool | None = None,
) -> None:
    """Print issue and file counts under a section header, then one line per rule.

    Rules are listed by descending issue count, ties broken by label.

    Args:
        issues: Issues saved during the run.
        title: Section title.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    section(title, use_color=detect_tty() if use_color is None else use_color)
    if not issues:
        status("No issues found", Tone.CLEAN, use_emoji=use_emoji, use_color=use_color)
        return
    files = {str(issue.file) for issue in issues}
    status(
        f"{len(issues)} issue(s) found, {len(files)} file(s) affected",
        Tone.FINDINGS,
        use_emoji=use_emoji,
        use_color=use_color,
    )
    per_rule = Counter(rule_label(issue) for issue in issues)
    for label, count in sorted(per_rule.items(), key=lambda item: (-item[1], item[0])):
        status(f"{label}: {count}", Tone.DETAIL, use_emoji=use_emoji, use_color=use_color, indent=2)


__all__ = [
    "CollectingIssueSink",
    "ConsoleIssueSink",
    "IssueSink",
    "ReportedIssue",
    "format_issue",
    "print_summary",
    "rule_label",
]
