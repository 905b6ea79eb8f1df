"""Declarative rule catalog.

Rules are static configuration: loaded once, validated all-or-nothing, and
never mutated during a run. Each rule id is bound to a predicate in one of the
analyzers; the catalog only carries its severity, review priority and the
rationale template used to render findings.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from string import Formatter
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

CATALOG_VERSION = 1


class Severity(str, Enum):
    """Review severity of a finding."""

    CRITICAL = "Critical"
    SUGGESTION = "Suggestion"
    WELL_DONE = "WellDone"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


class RuleCategory(str, Enum):
    ARCHITECTURE = "architecture"
    NAMING = "naming"
    COMPLEXITY = "complexity"
    ASYNC = "async"
    TESTING = "testing"


class ReviewPriority(str, Enum):
    """Order in which reviewers address concerns."""

    ARCHITECTURE = "architecture"
    PERFORMANCE = "performance"
    CORRECTNESS = "correctness"
    MAINTAINABILITY = "maintainability"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.SUGGESTION: 1,
    Severity.WELL_DONE: 2,
}

_PRIORITY_RANK = {
    ReviewPriority.ARCHITECTURE: 0,
    ReviewPriority.PERFORMANCE: 1,
    ReviewPriority.CORRECTNESS: 2,
    ReviewPriority.MAINTAINABILITY: 3,
}

# Rule id -> template fields its predicate supplies when rendering.
RULE_FIELDS: dict[str, frozenset[str]] = {
    "architecture": frozenset(
        {
            "from_module",
            "from_layer",
            "to_module",
            "to_layer",
            "allowed",
            "symbol",
            "reference",
        }
    ),
    "architecture-cycle": frozenset({"path", "layers"}),
    "layering-clean": frozenset({"module", "layer", "targets"}),
    "naming": frozenset({"symbol", "name", "kind", "identifiers"}),
    "complexity-length": frozenset({"symbol", "name", "line_count", "limit"}),
    "complexity-nesting": frozenset({"symbol", "name", "nesting_depth", "limit"}),
    "complexity-parameters": frozenset({"symbol", "name", "parameter_count", "limit"}),
    "async-blocking": frozenset({"symbol", "name"}),
    "test-naming": frozenset({"symbol", "name"}),
}

BUILTIN_RULES: tuple[dict[str, str], ...] = (
    {
        "id": "architecture",
        "category": "architecture",
        "severity": "Critical",
        "priority": "architecture",
        "rationale": (
            "{from_module} ({from_layer}) must not depend on {to_module} "
            "({to_layer}); {from_layer} may depend on {allowed}: "
            "{symbol} references {reference}"
        ),
    },
    {
        "id": "architecture-cycle",
        "category": "architecture",
        "severity": "Critical",
        "priority": "architecture",
        "rationale": "Module dependency cycle {path} across layers {layers}",
    },
    {
        "id": "layering-clean",
        "category": "architecture",
        "severity": "WellDone",
        "priority": "architecture",
        "rationale": "{module} ({layer}) only depends on permitted layers: {targets}",
    },
    {
        "id": "async-blocking",
        "category": "async",
        "severity": "Critical",
        "priority": "correctness",
        "rationale": (
            "{symbol} blocks on an asynchronous operation; await it instead "
            "to avoid deadlocks"
        ),
    },
    {
        "id": "naming",
        "category": "naming",
        "severity": "Suggestion",
        "priority": "maintainability",
        "rationale": "{kind} {symbol} has non-conventional identifiers: {identifiers}",
    },
    {
        "id": "complexity-length",
        "category": "complexity",
        "severity": "Suggestion",
        "priority": "maintainability",
        "rationale": "{symbol} is {line_count} lines long (limit {limit}); extract smaller methods",
    },
    {
        "id": "complexity-nesting",
        "category": "complexity",
        "severity": "Suggestion",
        "priority": "maintainability",
        "rationale": "{symbol} nests {nesting_depth} levels deep (limit {limit}); use guard clauses",
    },
    {
        "id": "complexity-parameters",
        "category": "complexity",
        "severity": "Suggestion",
        "priority": "maintainability",
        "rationale": "{symbol} takes {parameter_count} parameters (limit {limit}); introduce a parameter object",
    },
    {
        "id": "test-naming",
        "category": "testing",
        "severity": "Suggestion",
        "priority": "maintainability",
        "rationale": "Test {symbol} should read as an underscore-separated phrase, e.g. returns_null_when_order_is_missing",
    },
)

_FIELD_ROOT = re.compile(r"[.\[]")


class CatalogError(Exception):
    """Raised when a rule catalog cannot be loaded; aborts startup."""


class Rule(BaseModel):
    """A single declarative rule."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    category: RuleCategory
    severity: Severity
    priority: ReviewPriority
    rationale: str = Field(min_length=1)

    def template_fields(self) -> set[str]:
        fields: set[str] = set()
        for _literal, field_name, _spec, _conversion in Formatter().parse(
            self.rationale
        ):
            if field_name is None:
                continue
            fields.add(_FIELD_ROOT.split(field_name, maxsplit=1)[0])
        return fields

    def render(self, **fields: Any) -> str:
        return self.rationale.format(**fields)


class RuleCatalog:
    """Ordered, read-only collection of active rules."""

    def __init__(
        self, rules: Iterable[Rule], *, version: int = CATALOG_VERSION
    ) -> None:
        self._rules = tuple(rules)
        self._by_id = {rule.id: rule for rule in self._rules}
        self.version = version

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def get(self, rule_id: str) -> Rule | None:
        """Return the active rule, or None when it is disabled or absent."""
        return self._by_id.get(rule_id)

    def without(self, disabled: Iterable[str]) -> RuleCatalog:
        """Return a catalog with the given rule ids removed."""
        disabled_ids = set(disabled)
        unknown = sorted(disabled_ids - set(self._by_id))
        if unknown:
            msg = f"Cannot disable unknown rules: {', '.join(unknown)}"
            raise CatalogError(msg)
        return RuleCatalog(
            (rule for rule in self._rules if rule.id not in disabled_ids),
            version=self.version,
        )


def _validate_rule(rule: Rule) -> None:
    supplied = RULE_FIELDS.get(rule.id)
    if supplied is None:
        msg = f"Rule '{rule.id}' has no analyzer predicate"
        raise CatalogError(msg)

    try:
        used = rule.template_fields()
    except ValueError as exc:
        msg = f"Rule '{rule.id}' has a malformed rationale template: {exc}"
        raise CatalogError(msg) from exc

    unknown_fields = sorted(used - supplied)
    if unknown_fields:
        msg = (
            f"Rule '{rule.id}' rationale uses unknown fields: "
            f"{', '.join(unknown_fields)}"
        )
        raise CatalogError(msg)


def build_catalog(data: Any) -> RuleCatalog:
    """Validate a decoded catalog document ``{"version": 1, "rules": [...]}``.

    Loading is all-or-nothing: the first invalid rule aborts with
    ``CatalogError`` and no partial catalog is returned.
    """
    if not isinstance(data, dict):
        msg = "Rule catalog must be an object with 'version' and 'rules'"
        raise CatalogError(msg)

    version = data.get("version")
    if version != CATALOG_VERSION:
        msg = f"Unsupported catalog version {version!r} (expected {CATALOG_VERSION})"
        raise CatalogError(msg)

    raw_rules = data.get("rules")
    if not isinstance(raw_rules, list):
        msg = "Rule catalog 'rules' must be a list"
        raise CatalogError(msg)

    rules: list[Rule] = []
    seen: set[str] = set()
    for index, raw_rule in enumerate(raw_rules):
        try:
            rule = Rule.model_validate(raw_rule)
        except ValidationError as exc:
            msg = f"Invalid rule at index {index}: {exc}"
            raise CatalogError(msg) from exc
        if rule.id in seen:
            msg = f"Duplicate rule id '{rule.id}'"
            raise CatalogError(msg)
        _validate_rule(rule)
        seen.add(rule.id)
        rules.append(rule)

    return RuleCatalog(rules, version=version)


def builtin_catalog() -> RuleCatalog:
    return build_catalog({"version": CATALOG_VERSION, "rules": list(BUILTIN_RULES)})


def load_catalog(
    path: Path | None = None, *, disabled: Iterable[str] = ()
) -> RuleCatalog:
    """Load the built-in catalog, or a JSON catalog file when ``path`` is given."""
    if path is None:
        catalog = builtin_catalog()
    else:
        try:
            raw = orjson.loads(path.read_bytes())
        except OSError as exc:
            msg = f"Failed to read rule catalog {path}: {exc}"
            raise CatalogError(msg) from exc
        except orjson.JSONDecodeError as exc:
            msg = f"Invalid JSON in {path}: {exc}"
            raise CatalogError(msg) from exc
        catalog = build_catalog(raw)

    catalog = catalog.without(disabled)
    logger.debug("Loaded rule catalog v%d with %d rules", catalog.version, len(catalog))
    return catalog


__all__ = [
    "BUILTIN_RULES",
    "CATALOG_VERSION",
    "RULE_FIELDS",
    "CatalogError",
    "ReviewPriority",
    "Rule",
    "RuleCatalog",
    "RuleCategory",
    "Severity",
    "build_catalog",
    "builtin_catalog",
    "load_catalog",
]
