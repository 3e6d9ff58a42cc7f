# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rule catalog and the per-run registry of active rules."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError, UnknownRuleError
from .models import OptionPairs, RuleDescriptor, RuleKey
from .severity import DEFAULT_SEVERITY, Severity, parse_severity

CSS_REPOSITORY: Final[str] = "css"


class _NotFound:
    """Sentinel type returned by :meth:`RuleRegistry.resolve` for unknown ids."""

    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final[_NotFound] = _NotFound()


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Known rule: internal key, external linter id and default options."""

    key: RuleKey
    external_id: str
    default_options: OptionPairs = ()


@dataclass(frozen=True, slots=True)
class RuleCatalog:
    """Static vocabulary mapping internal rule keys to external linter rules."""

    entries: tuple[CatalogEntry, ...]
    _by_key: dict[RuleKey, CatalogEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_key: dict[RuleKey, CatalogEntry] = {}
        seen_ids: set[str] = set()
        for entry in self.entries:
            if entry.key in by_key:
                raise ConfigError(f"duplicate rule key in catalog: {entry.key}")
            if entry.external_id in seen_ids:
                raise ConfigError(f"duplicate external rule id in catalog: {entry.external_id}")
            by_key[entry.key] = entry
            seen_ids.add(entry.external_id)
        object.__setattr__(self, "_by_key", by_key)

    def get(self, key: RuleKey) -> CatalogEntry | None:
        """Return the catalog entry registered for ``key``."""

        return self._by_key.get(key)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def _css(rule: str, external_id: str, **options: Any) -> CatalogEntry:
    return CatalogEntry(
        key=RuleKey(repository=CSS_REPOSITORY, rule=rule),
        external_id=external_id,
        default_options=tuple(options.items()),
    )


BUILTIN_CATALOG: Final[RuleCatalog] = RuleCatalog(
    entries=(
        _css("S4647", "color-no-invalid-hex"),
        _css("S4648", "font-family-no-duplicate-names"),
        _css("S4649", "font-family-no-missing-generic-family-keyword"),
        _css("S4650", "function-calc-no-unspaced-operator"),
        _css("S4651", "function-linear-gradient-no-nonstandard-direction"),
        _css("S4652", "string-no-newline"),
        _css("S4653", "unit-no-unknown"),
        _css("S4654", "property-no-unknown"),
        _css("S4655", "keyframe-declaration-no-important"),
        _css("S4656", "declaration-block-no-duplicate-properties"),
        _css("S4657", "declaration-block-no-shorthand-property-overrides"),
        _css("S4658", "block-no-empty"),
        _css("S4659", "selector-pseudo-class-no-unknown"),
        _css("S4660", "selector-pseudo-element-no-unknown"),
        _css("S4661", "media-feature-name-no-unknown"),
        _css("S4662", "at-rule-no-unknown"),
        _css("S4663", "comment-no-empty"),
        _css("S4664", "no-descending-specificity"),
        _css("S4666", "no-duplicate-selectors"),
        _css("S4667", "no-empty-source"),
        _css("S4668", "no-extra-semicolons"),
        _css("S4670", "selector-type-no-unknown"),
    ),
)


class RuleActivation(BaseModel):
    """Host-side activation of a catalog rule."""

    model_config = ConfigDict(frozen=True)

    key: RuleKey
    options: OptionPairs | None = None
    severity: Severity = DEFAULT_SEVERITY

    @field_validator("key", mode="before")
    @classmethod
    def _parse_key(cls, value: object) -> object:
        return RuleKey.parse(value) if isinstance(value, str) else value

    @field_validator("severity", mode="before")
    @classmethod
    def _parse_severity(cls, value: object) -> object:
        return parse_severity(value) if isinstance(value, str) else value

    @field_validator("options", mode="before")
    @classmethod
    def _parse_options(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value


class RuleRegistry:
    """Immutable snapshot of the rules enabled for one analysis run."""

    __slots__ = ("_descriptors", "_by_external_id")

    def __init__(self, descriptors: Iterable[RuleDescriptor]) -> None:
        """Index ``descriptors`` by their external identifier.

        Args:
            descriptors: Active rules supplied by the host.

        Raises:
            ConfigError: If two descriptors share an external identifier.
        """

        by_external_id: dict[str, RuleDescriptor] = {}
        for descriptor in descriptors:
            existing = by_external_id.get(descriptor.external_id)
            if existing is not None and existing != descriptor:
                raise ConfigError(
                    f"external rule id '{descriptor.external_id}' is bound to both "
                    f"{existing.internal_key} and {descriptor.internal_key}",
                )
            by_external_id[descriptor.external_id] = descriptor
        self._by_external_id: Mapping[str, RuleDescriptor] = by_external_id
        self._descriptors: frozenset[RuleDescriptor] = frozenset(by_external_id.values())

    @classmethod
    def from_activation(
        cls,
        activations: Iterable[RuleActivation | Mapping[str, Any]],
        *,
        catalog: RuleCatalog = BUILTIN_CATALOG,
    ) -> RuleRegistry:
        """Build a registry from host activation input.

        Args:
            activations: Activated rules, either as models or raw mappings with
                ``key``, ``options`` and ``severity`` entries.
            catalog: Vocabulary used to translate internal keys.

        Returns:
            RuleRegistry: Registry holding one descriptor per activation.

        Raises:
            ConfigError: If an activation is malformed or names a key the
                catalog does not know.
        """

        descriptors: list[RuleDescriptor] = []
        for raw in activations:
            try:
                activation = raw if isinstance(raw, RuleActivation) else RuleActivation.model_validate(raw)
            except ValidationError as exc:
                raise ConfigError(f"invalid rule activation {raw!r}: {exc}") from exc
            entry = catalog.get(activation.key)
            if entry is None:
                raise ConfigError(f"rule {activation.key} is not part of the rule catalog")
            options = entry.default_options if activation.options is None else activation.options
            descriptors.append(
                RuleDescriptor(
                    external_id=entry.external_id,
                    internal_key=entry.key,
                    options=options,
                    severity=activation.severity,
                ),
            )
        return cls(descriptors)

    def active_rules(self) -> frozenset[RuleDescriptor]:
        """Return the descriptors of every active rule."""

        return self._descriptors

    def resolve(self, external_id: str) -> RuleKey | _NotFound:
        """Return the internal key for ``external_id`` or :data:`NOT_FOUND`."""

        descriptor = self._by_external_id.get(external_id)
        if descriptor is None:
            return NOT_FOUND
        return descriptor.internal_key

    def require(self, external_id: str) -> RuleKey:
        """Return the internal key for ``external_id``.

        Raises:
            UnknownRuleError: If the rule is unknown or not enabled.
        """

        resolved = self.resolve(external_id)
        if isinstance(resolved, _NotFound):
            raise UnknownRuleError(external_id)
        return resolved

    def __contains__(self, external_id: object) -> bool:
        return external_id in self._by_external_id

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[RuleDescriptor]:
        return iter(sorted(self._descriptors, key=lambda descriptor: descriptor.external_id))


__all__ = [
    "BUILTIN_CATALOG",
    "CSS_REPOSITORY",
    "CatalogEntry",
    "NOT_FOUND",
    "RuleActivation",
    "RuleCatalog",
    "RuleRegistry",
]
