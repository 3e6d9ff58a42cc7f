# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the external linter and turn its report into normalised issues."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from . import config_builder, report
from .config import BridgeSettings
from .errors import ProcessExecutionError, ReportFormatError
from .filesystem import FileIndex
from .models import NormalizedIssue, PerFileFindings, RuleDescriptor
from .process import ProcessResult, ProcessRunner, SubprocessRunner
from .reconcile import reconcile
from .reporting import IssueSink
from .rules import RuleRegistry

LOGGER = logging.getLogger(__name__)

DEPLOY_DIR_PLACEHOLDER: Final[str] = "{deploy_dir}"


class CommandTemplate(BaseModel):
    """Linter command line and config location, parameterised by the deploy directory."""

    model_config = ConfigDict(frozen=True)

    arguments: tuple[str, ...] = Field(min_length=1)
    config_path: str = Field(min_length=1)

    def command_parts(self, deploy_dir: Path) -> list[str]:
        """Return the argument vector with ``{deploy_dir}`` expanded."""

        target = str(deploy_dir)
        return [argument.replace(DEPLOY_DIR_PLACEHOLDER, target) for argument in self.arguments]

    def config_file(self, deploy_dir: Path) -> Path:
        """Return the path the generated config must be written to."""

        return Path(self.config_path.replace(DEPLOY_DIR_PLACEHOLDER, str(deploy_dir)))


class Orchestrator:
    """Sequence config generation, linter execution, parsing and reconciliation."""

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        settings: BridgeSettings | None = None,
    ) -> None:
        """Create an orchestrator.

        Args:
            runner: Process runner; a :class:`SubprocessRunner` honouring
                ``settings.timeout`` when omitted.
            settings: Runtime settings; defaults when omitted.
        """

        self._settings = settings or BridgeSettings()
        self._runner = runner or SubprocessRunner(timeout=self._settings.timeout)

    @property
    def settings(self) -> BridgeSettings:
        """Return the settings used by this orchestrator."""

        return self._settings

    def run(
        self,
        active_rules: RuleRegistry | Iterable[RuleDescriptor],
        working_dir: Path,
        command_template: CommandTemplate,
        file_index: FileIndex,
    ) -> list[NormalizedIssue]:
        """Lint ``working_dir`` and return the reconciled issues.

        Each step runs only when the previous one succeeded; the first failure
        propagates unchanged and no issues are returned.

        Args:
            active_rules: Registry, or descriptors to build one from.
            working_dir: Deploy directory the linter runs in.
            command_template: Host-supplied command and config location.
            file_index: Tracked files, looked up by absolute path.

        Returns:
            list[NormalizedIssue]: Issues in report order.

        Raises:
            OSError: If the config file cannot be written.
            ProcessLaunchError: If the linter cannot be started.
            ProcessExecutionError: If the linter fails without a usable report.
            ReportFormatError: If the linter succeeds but its report is malformed.
            UnknownRuleError: If the report references an inactive rule.
        """

        registry = active_rules if isinstance(active_rules, RuleRegistry) else RuleRegistry(active_rules)
        linter_config = config_builder.build(registry.active_rules())
        config_builder.write_config(linter_config, command_template.config_file(working_dir))

        command = command_template.command_parts(working_dir)
        result = self._runner.run(command, working_dir)
        findings = self._parse_result(result)
        issues = reconcile(findings, registry, file_index)
        LOGGER.info("stylelint reported %d issue(s) on tracked files", len(issues))
        return issues

    def _parse_result(self, result: ProcessResult) -> list[PerFileFindings]:
        """Parse ``result`` applying the exit-status policy."""

        try:
            findings = report.parse(result.stdout)
        except ReportFormatError as exc:
            if result.ok:
                raise
            raise ProcessExecutionError(
                result.command,
                result.returncode,
                result.stderr,
                detail=f"no usable report: {exc}",
            ) from exc
        if not result.ok:
            if not self._settings.accept_nonzero_exit:
                raise ProcessExecutionError(result.command, result.returncode, result.stderr)
            LOGGER.debug("linter exited with status %d but produced a valid report", result.returncode)
        return findings

    def analyze(
        self,
        active_rules: RuleRegistry | Iterable[RuleDescriptor],
        working_dir: Path,
        command_template: CommandTemplate,
        file_index: FileIndex,
        sink: IssueSink,
    ) -> int:
        """Run the linter and hand every issue to ``sink``.

        Nothing reaches ``sink`` unless the whole run succeeds.

        Returns:
            int: Number of issues emitted.
        """

        issues = self.run(active_rules, working_dir, command_template, file_index)
        return emit(issues, sink)


def emit(issues: Sequence[NormalizedIssue], sink: IssueSink) -> int:
    """Save each issue through ``sink`` and return how many were saved."""

    for issue in issues:
        sink.save(issue)
    return len(issues)


__all__ = ["CommandTemplate", "DEPLOY_DIR_PLACEHOLDER", "Orchestrator", "emit"]
