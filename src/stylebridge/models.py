# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the stylebridge package."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .severity import DEFAULT_SEVERITY, Severity

OptionPairs: TypeAlias = tuple[tuple[str, Any], ...]

STYLELINT_ENGINE: Final[str] = "stylelint"
_SOURCE_PATH_FIELD: Final[str] = "source_path"


def _freeze(value: Any) -> Any:
    """Return ``value`` with nested lists converted to tuples."""

    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, Mapping):
        return {str(key): _freeze(item) for key, item in value.items()}
    return value


def _coerce_option_pairs(value: object) -> object:
    """Normalise option input into an ordered tuple of ``(key, value)`` pairs."""

    if value is None:
        return ()
    if isinstance(value, Mapping):
        return tuple((str(key), _freeze(item)) for key, item in value.items())
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        pairs: list[tuple[str, Any]] = []
        for entry in value:
            if not isinstance(entry, Sequence) or isinstance(entry, (str, bytes, bytearray)) or len(entry) != 2:
                raise ValueError(f"rule option must be a (key, value) pair, got {entry!r}")
            key, item = entry
            pairs.append((str(key), _freeze(item)))
        return tuple(pairs)
    return value


class RuleKey(BaseModel):
    """Internal identifier of an analysis rule, scoped to a rule repository."""

    model_config = ConfigDict(frozen=True)

    repository: str
    rule: str

    @classmethod
    def parse(cls, text: str) -> RuleKey:
        """Build a key from its ``repository:rule`` form.

        Args:
            text: Serialised key such as ``"css:S4666"``.

        Returns:
            RuleKey: Parsed key.

        Raises:
            ValueError: If ``text`` lacks either component.
        """

        repository, sep, rule = text.partition(":")
        if not sep or not repository or not rule:
            raise ValueError(f"rule key must look like 'repository:rule', got {text!r}")
        return cls(repository=repository, rule=rule)

    def __str__(self) -> str:
        return f"{self.repository}:{self.rule}"


class RuleDescriptor(BaseModel):
    """Active rule as seen by the external linter."""

    model_config = ConfigDict(frozen=True)

    external_id: str = Field(min_length=1)
    internal_key: RuleKey
    options: OptionPairs = Field(default_factory=tuple)
    severity: Severity = DEFAULT_SEVERITY

    @field_validator("options", mode="before")
    @classmethod
    def _normalise_options(cls, value: object) -> object:
        return _coerce_option_pairs(value)

    def __hash__(self) -> int:
        return hash((self.external_id, self.internal_key, self.severity))


class RuleSettings(BaseModel):
    """Configuration of a single rule inside :class:`LinterConfig`."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    options: OptionPairs = Field(default_factory=tuple)
    severity: Severity = DEFAULT_SEVERITY


class LinterConfig(BaseModel):
    """Rule configuration handed to the external linter for a single run."""

    model_config = ConfigDict(frozen=True)

    rules: dict[str, RuleSettings] = Field(default_factory=dict)

    def __contains__(self, external_id: object) -> bool:
        return external_id in self.rules

    def __len__(self) -> int:
        return len(self.rules)


class RawFinding(BaseModel):
    """Single finding reported by the external linter, prior to reconciliation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_path: str
    line: int = Field(ge=1, strict=True)
    message: str = Field(alias="text", strict=True)
    external_rule_id: str = Field(alias="rule", strict=True)
    severity: str | None = None


class PerFileFindings(BaseModel):
    """Findings reported for one source file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_path: str = Field(alias="source", strict=True)
    findings: tuple[RawFinding, ...] = Field(alias="warnings")

    @model_validator(mode="before")
    @classmethod
    def _propagate_source(cls, data: Any) -> Any:
        """Copy the file path onto each warning so findings are self-describing."""

        if not isinstance(data, Mapping):
            return data
        source = data.get("source", data.get(_SOURCE_PATH_FIELD))
        warnings = data.get("warnings", data.get("findings"))
        if not isinstance(source, str) or not isinstance(warnings, list):
            return data
        payload = dict(data)
        key = "warnings" if "warnings" in data else "findings"
        payload[key] = [
            {**warning, _SOURCE_PATH_FIELD: source} if isinstance(warning, Mapping) else warning
            for warning in warnings
        ]
        return payload


class InputFile(BaseModel):
    """Handle for a source file tracked by the host analysis."""

    model_config = ConfigDict(frozen=True)

    path: Path
    language: str | None = None

    @field_validator("path")
    @classmethod
    def _require_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"input file path must be absolute, got {value}")
        return value

    def __str__(self) -> str:
        return self.path.as_posix()


class NormalizedIssue(BaseModel):
    """Reconciled issue bound to a tracked file and an internal rule key."""

    model_config = ConfigDict(frozen=True)

    file: InputFile
    line: int = Field(ge=1)
    message: str
    rule_key: RuleKey


class ExternalIssue(BaseModel):
    """Issue imported from a previously generated linter report."""

    model_config = ConfigDict(frozen=True)

    engine: str = STYLELINT_ENGINE
    rule_id: str
    file: InputFile
    line: int = Field(ge=1)
    message: str
    severity: Severity = Severity.WARNING


__all__ = [
    "ExternalIssue",
    "InputFile",
    "LinterConfig",
    "NormalizedIssue",
    "OptionPairs",
    "PerFileFindings",
    "RawFinding",
    "RuleDescriptor",
    "RuleKey",
    "RuleSettings",
    "STYLELINT_ENGINE",
]
