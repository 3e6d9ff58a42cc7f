# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for issue sinks and console summaries."""

from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console

from stylebridge.models import ExternalIssue, InputFile, NormalizedIssue, RuleKey
from stylebridge.orchestrator import emit
from stylebridge.reporting import CollectingIssueSink, ConsoleIssueSink, IssueSink, format_issue, print_summary
from stylebridge.severity import Severity


def _issue(path: Path, line: int = 3) -> NormalizedIssue:
    return NormalizedIssue(
        file=InputFile(path=path),
        line=line,
        message="dup",
        rule_key=RuleKey(repository="css", rule="S4666"),
    )


def test_emit_calls_sink_once_per_issue(tmp_path: Path) -> None:
    sink = CollectingIssueSink()
    issues = [_issue(tmp_path / "a.css", 1), _issue(tmp_path / "a.css", 2)]

    assert emit(issues, sink) == 2
    assert sink.issues == issues
    assert isinstance(sink, IssueSink)


def test_format_issue_for_reconciled_and_external(tmp_path: Path) -> None:
    target = tmp_path / "a.css"
    external = ExternalIssue(
        rule_id="block-no-empty",
        file=InputFile(path=target),
        line=4,
        message="empty",
        severity=Severity.ERROR,
    )

    assert format_issue(_issue(target)) == f"{target.as_posix()}:3 [css:S4666] dup"
    assert format_issue(external) == f"{target.as_posix()}:4 [external_stylelint:block-no-empty] empty"


def test_console_sink_prints_each_issue(tmp_path: Path) -> None:
    console = Console(record=True, width=200, color_system=None)
    sink = ConsoleIssueSink(console, use_color=False)

    sink.save(_issue(tmp_path / "a.css"))

    assert sink.count == 1
    assert "[css:S4666] dup" in console.export_text()


def test_print_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    print_summary([_issue(tmp_path / "a.css", 1), _issue(tmp_path / "a.css", 2)], use_emoji=False, use_color=False)

    output = capsys.readouterr().out
    assert "--- stylelint ---" in output
    assert "2 issue(s) found" in output
    assert "1 file(s) affected" in output


def test_print_summary_without_issues(capsys: pytest.CaptureFixture[str]) -> None:
    print_summary([], title="css", use_emoji=False, use_color=False)

    output = capsys.readouterr().out
    assert "--- css ---" in output
    assert "No issues found" in output


def test_print_summary_counts_issues_per_rule(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "a.css"
    external = ExternalIssue(rule_id="block-no-empty", file=InputFile(path=tmp_path / "b.css"), line=1, message="empty")

    print_summary([_issue(target, 1), external, _issue(target, 2)], use_emoji=False, use_color=False)

    lines = capsys.readouterr().out.splitlines()
    assert "3 issue(s) found, 2 file(s) affected" in lines
    assert lines[-2:] == ["  css:S4666: 2", "  external_stylelint:block-no-empty: 1"]


def test_print_summary_marks_lines_with_emoji(capsys: pytest.CaptureFixture[str]) -> None:
    print_summary([], use_emoji=True, use_color=False)

    assert "✅ No issues found" in capsys.readouterr().out
