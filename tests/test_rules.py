# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the rule catalog and the per-run registry."""

from __future__ import annotations

import pytest

from stylebridge.errors import ConfigError, UnknownRuleError
from stylebridge.models import RuleDescriptor, RuleKey
from stylebridge.rules import BUILTIN_CATALOG, NOT_FOUND, CatalogEntry, RuleCatalog, RuleRegistry
from stylebridge.severity import Severity


def css_key(rule: str) -> RuleKey:
    return RuleKey(repository="css", rule=rule)


def test_resolve_returns_internal_key(registry: RuleRegistry) -> None:
    assert registry.resolve("no-duplicate-selectors") == css_key("S4666")
    assert "block-no-empty" in registry
    assert len(registry) == 2


def test_resolve_unknown_id_returns_sentinel(registry: RuleRegistry) -> None:
    resolved = registry.resolve("unknown-rule")

    assert resolved is NOT_FOUND
    assert not resolved


def test_resolve_is_exact_match(registry: RuleRegistry) -> None:
    assert registry.resolve("No-Duplicate-Selectors") is NOT_FOUND
    assert registry.resolve("no-duplicate-selectors ") is NOT_FOUND


def test_require_raises_unknown_rule(registry: RuleRegistry) -> None:
    with pytest.raises(UnknownRuleError) as excinfo:
        registry.require("unknown-rule")

    assert excinfo.value.rule_id == "unknown-rule"
    assert "unknown-rule" in str(excinfo.value)


def test_duplicate_external_id_is_rejected() -> None:
    with pytest.raises(ConfigError, match="color-no-invalid-hex"):
        RuleRegistry(
            [
                RuleDescriptor(external_id="color-no-invalid-hex", internal_key=css_key("S4647")),
                RuleDescriptor(external_id="color-no-invalid-hex", internal_key=css_key("S9999")),
            ],
        )


def test_active_rules_is_an_immutable_snapshot() -> None:
    descriptors = [RuleDescriptor(external_id="block-no-empty", internal_key=css_key("S4658"))]
    registry = RuleRegistry(descriptors)
    descriptors.append(RuleDescriptor(external_id="comment-no-empty", internal_key=css_key("S4663")))

    active = registry.active_rules()

    assert isinstance(active, frozenset)
    assert {rule.external_id for rule in active} == {"block-no-empty"}


def test_from_activation_uses_catalog_and_overrides() -> None:
    registry = RuleRegistry.from_activation(
        [
            {"key": "css:S4666"},
            {"key": "css:S4662", "options": {"ignoreAtRules": ["include", "mixin"]}, "severity": "warning"},
        ],
    )

    assert registry.resolve("no-duplicate-selectors") == css_key("S4666")
    at_rule = next(rule for rule in registry.active_rules() if rule.external_id == "at-rule-no-unknown")
    assert at_rule.severity is Severity.WARNING
    assert at_rule.options == (("ignoreAtRules", ("include", "mixin")),)


def test_from_activation_rejects_unknown_key() -> None:
    with pytest.raises(ConfigError, match="css:S0000"):
        RuleRegistry.from_activation([{"key": "css:S0000"}])


def test_from_activation_rejects_malformed_key() -> None:
    with pytest.raises(ConfigError):
        RuleRegistry.from_activation([{"key": "no-colon"}])


def test_from_activation_rejects_unknown_severity() -> None:
    with pytest.raises(ConfigError):
        RuleRegistry.from_activation([{"key": "css:S4666", "severity": "catastrophic"}])


def test_catalog_rejects_duplicate_external_ids() -> None:
    with pytest.raises(ConfigError):
        RuleCatalog(
            entries=(
                CatalogEntry(key=css_key("S1"), external_id="block-no-empty"),
                CatalogEntry(key=css_key("S2"), external_id="block-no-empty"),
            ),
        )


def test_builtin_catalog_maps_known_rules() -> None:
    entry = BUILTIN_CATALOG.get(RuleKey.parse("css:S4666"))

    assert entry is not None
    assert entry.external_id == "no-duplicate-selectors"
    assert len({item.external_id for item in BUILTIN_CATALOG}) == len(BUILTIN_CATALOG)


def test_rule_key_round_trips_through_text() -> None:
    key = RuleKey.parse("css:S4658")

    assert str(key) == "css:S4658"
    assert key == css_key("S4658")
