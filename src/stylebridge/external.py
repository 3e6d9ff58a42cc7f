# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Import issues from stylelint reports generated outside the analysis."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .errors import ReportFormatError
from .filesystem import FileIndex
from .models import STYLELINT_ENGINE, ExternalIssue, PerFileFindings
from .report import parse_file
from .severity import Severity, severity_from_label

LOGGER = logging.getLogger(__name__)


def _external_issues(findings: Iterable[PerFileFindings], file_index: FileIndex) -> list[ExternalIssue]:
    issues: list[ExternalIssue] = []
    for per_file in findings:
        input_file = file_index.get(per_file.source_path)
        if input_file is None:
            LOGGER.warning(
                "No input file found for %s. No stylelint issues will be imported on this file.",
                per_file.source_path,
            )
            continue
        for finding in per_file.findings:
            issues.append(
                ExternalIssue(
                    engine=STYLELINT_ENGINE,
                    rule_id=finding.external_rule_id,
                    file=input_file,
                    line=finding.line,
                    message=finding.message,
                    severity=severity_from_label(finding.severity, Severity.WARNING),
                ),
            )
    return issues


def import_reports(report_paths: Iterable[Path], file_index: FileIndex, *, base_dir: Path) -> list[ExternalIssue]:
    """Read previously generated stylelint JSON reports.

    Unlike a linter run, imported findings need not reference active rules.
    A report that cannot be read or parsed is skipped with a warning so the
    remaining reports still import.

    Args:
        report_paths: Report files; relative paths are resolved against ``base_dir``.
        file_index: Tracked files, looked up by absolute path.
        base_dir: Directory anchoring relative report paths.

    Returns:
        list[ExternalIssue]: Issues from every readable report, in report order.
    """

    issues: list[ExternalIssue] = []
    for raw_path in report_paths:
        path = raw_path if raw_path.is_absolute() else base_dir / raw_path
        try:
            findings = parse_file(path)
        except (OSError, ReportFormatError) as exc:
            LOGGER.warning(
                "No issues information will be saved as the report file '%s' can't be read: %s",
                path,
                exc,
            )
            continue
        imported = _external_issues(findings, file_index)
        LOGGER.debug("imported %d issue(s) from %s", len(imported), path)
        issues.extend(imported)
    return issues


__all__ = ["import_reports"]
