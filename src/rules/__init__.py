"""Rule definitions for archguard-core."""

from rules.catalog import (
    CatalogError,
    ReviewPriority,
    Rule,
    RuleCatalog,
    RuleCategory,
    Severity,
    builtin_catalog,
    load_catalog,
)
from rules.config import (
    ConfigError,
    ConformanceConfig,
    Thresholds,
    load_config,
)
from rules.layers import PERMITTED_DEPENDENCIES, allowed_targets, is_violation

__all__ = [
    "PERMITTED_DEPENDENCIES",
    "CatalogError",
    "ConfigError",
    "ConformanceConfig",
    "ReviewPriority",
    "Rule",
    "RuleCatalog",
    "RuleCategory",
    "Severity",
    "Thresholds",
    "allowed_targets",
    "builtin_catalog",
    "is_violation",
    "load_catalog",
    "load_config",
]
