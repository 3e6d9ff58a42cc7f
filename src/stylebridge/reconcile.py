# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map raw linter findings onto tracked files and internal rule keys."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .filesystem import FileIndex
from .models import NormalizedIssue, PerFileFindings
from .rules import RuleRegistry

LOGGER = logging.getLogger(__name__)


def reconcile(
    findings: Iterable[PerFileFindings],
    registry: RuleRegistry,
    file_index: FileIndex,
) -> list[NormalizedIssue]:
    """Turn parsed findings into normalised issues.

    Findings for files missing from ``file_index`` are skipped: the linter may
    scan files the host does not track. A finding whose rule is not active in
    ``registry`` aborts the whole reconciliation.

    Args:
        findings: Parsed report, grouped by file.
        registry: Active rules of the current run.
        file_index: Lookup of tracked files by absolute path.

    Returns:
        list[NormalizedIssue]: Issues in report order.

    Raises:
        UnknownRuleError: If a finding on a tracked file references a rule that
            is unknown or not enabled.
    """

    issues: list[NormalizedIssue] = []
    for per_file in findings:
        input_file = file_index.get(per_file.source_path)
        if input_file is None:
            LOGGER.debug("skipping %d finding(s) for untracked file %s", len(per_file.findings), per_file.source_path)
            continue
        for finding in per_file.findings:
            rule_key = registry.require(finding.external_rule_id)
            issues.append(
                NormalizedIssue(
                    file=input_file,
                    line=finding.line,
                    message=finding.message,
                    rule_key=rule_key,
                ),
            )
    return issues


__all__ = ["reconcile"]
