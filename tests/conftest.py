# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from stylebridge.filesystem import InputFileIndex
from stylebridge.models import RuleDescriptor, RuleKey
from stylebridge.process import ProcessResult
from stylebridge.rules import RuleRegistry


class FakeRunner:
    """Process runner returning canned output and recording invocations."""

    def __init__(self, stdout: bytes | str = b"[]", *, returncode: int = 0, stderr: str = "") -> None:
        self.stdout = stdout.encode("utf-8") if isinstance(stdout, str) else stdout
        self.returncode = returncode
        self.stderr = stderr
        self.calls: list[tuple[tuple[str, ...], Path]] = []

    def run(self, command_parts: Sequence[str], working_dir: Path) -> ProcessResult:
        self.calls.append((tuple(command_parts), working_dir))
        return ProcessResult(
            command=tuple(command_parts),
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
        )


def _css_key(rule: str) -> RuleKey:
    return RuleKey(repository="css", rule=rule)


@pytest.fixture
def registry() -> RuleRegistry:
    """Registry with two active rules."""
    return RuleRegistry(
        [
            RuleDescriptor(external_id="no-duplicate-selectors", internal_key=_css_key("S4666")),
            RuleDescriptor(external_id="block-no-empty", internal_key=_css_key("S4658")),
        ],
    )


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Return the fake runner class so tests can configure canned output."""
    return FakeRunner


@pytest.fixture
def css_file(tmp_path: Path) -> Path:
    """Return a tracked stylesheet inside ``tmp_path``."""
    target = tmp_path / "a.css"
    target.write_text("a { color: red; }\na { }\n", encoding="utf-8")
    return target


@pytest.fixture
def file_index(css_file: Path) -> InputFileIndex:
    return InputFileIndex.from_paths([css_file])
