# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for reconciling raw findings with tracked files and active rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from stylebridge.errors import UnknownRuleError
from stylebridge.filesystem import InputFileIndex
from stylebridge.models import PerFileFindings, RawFinding, RuleKey
from stylebridge.reconcile import reconcile
from stylebridge.rules import RuleRegistry


def _per_file(source: str, *warnings: tuple[int, str, str]) -> PerFileFindings:
    return PerFileFindings(
        source_path=source,
        findings=tuple(
            RawFinding(source_path=source, line=line, message=text, external_rule_id=rule)
            for line, text, rule in warnings
        ),
    )


def test_single_known_finding_becomes_one_issue(
    registry: RuleRegistry,
    file_index: InputFileIndex,
    css_file: Path,
) -> None:
    findings = [_per_file(str(css_file), (3, "dup", "no-duplicate-selectors"))]

    issues = reconcile(findings, registry, file_index)

    assert len(issues) == 1
    issue = issues[0]
    assert issue.file.path == css_file
    assert issue.line == 3
    assert issue.message == "dup"
    assert issue.rule_key == RuleKey(repository="css", rule="S4666")


def test_unknown_rule_fails_without_issues(
    registry: RuleRegistry,
    file_index: InputFileIndex,
    css_file: Path,
) -> None:
    findings = [
        _per_file(
            str(css_file),
            (1, "empty", "block-no-empty"),
            (3, "dup", "unknown-rule"),
        ),
    ]

    with pytest.raises(UnknownRuleError) as excinfo:
        reconcile(findings, registry, file_index)

    assert excinfo.value.rule_id == "unknown-rule"


def test_unknown_file_is_skipped(
    registry: RuleRegistry,
    file_index: InputFileIndex,
    css_file: Path,
    tmp_path: Path,
) -> None:
    findings = [
        _per_file(str(tmp_path / "vendor" / "bootstrap.css"), (10, "dup", "no-duplicate-selectors")),
        _per_file(str(css_file), (2, "Unexpected empty block", "block-no-empty")),
    ]

    issues = reconcile(findings, registry, file_index)

    assert [(issue.file.path, issue.line, issue.message) for issue in issues] == [
        (css_file, 2, "Unexpected empty block"),
    ]


def test_unknown_rule_on_untracked_file_is_skipped(
    registry: RuleRegistry,
    file_index: InputFileIndex,
) -> None:
    findings = [_per_file("/elsewhere/x.css", (1, "whatever", "unknown-rule"))]

    assert reconcile(findings, registry, file_index) == []


def test_empty_findings_yield_no_issues(registry: RuleRegistry, file_index: InputFileIndex) -> None:
    assert reconcile([], registry, file_index) == []


def test_issues_follow_report_order(registry: RuleRegistry, tmp_path: Path) -> None:
    first = tmp_path / "b.css"
    second = tmp_path / "a.css"
    index = InputFileIndex.from_paths([first, second])
    findings = [
        _per_file(str(first), (5, "five", "block-no-empty"), (1, "one", "no-duplicate-selectors")),
        _per_file(str(second), (2, "two", "block-no-empty")),
    ]

    issues = reconcile(findings, registry, index)

    assert [(issue.file.path.name, issue.line) for issue in issues] == [("b.css", 5), ("b.css", 1), ("a.css", 2)]


def test_file_lookup_is_exact(registry: RuleRegistry, file_index: InputFileIndex, css_file: Path) -> None:
    relative = _per_file(css_file.name, (1, "dup", "no-duplicate-selectors"))

    assert reconcile([relative], registry, file_index) == []
