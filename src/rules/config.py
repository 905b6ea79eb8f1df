from __future__ import annotations

from pathlib import Path
from typing import Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_FILENAME = "archguard.toml"

ReportFormat = Literal["text", "json"]

DEFAULT_TEST_MODULE_GLOBS = [
    "*.Tests",
    "*.Tests.*",
    "*.UnitTests",
    "*.IntegrationTests",
]


class Thresholds(BaseModel):
    """Complexity limits; a metric strictly above its limit is reported."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_method_lines: int = Field(
        default=50, ge=0, description="Maximum method length in lines"
    )
    max_nesting_depth: int = Field(
        default=3, ge=0, description="Maximum block nesting depth of a method"
    )
    max_parameters: int = Field(
        default=5, ge=0, description="Maximum number of method parameters"
    )


class ReportConfig(BaseModel):
    """Report rendering options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: ReportFormat = Field(default="text", description="Output format")


class ConformanceConfig(BaseModel):
    """Configuration for a conformance run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads for per-module pattern analysis (1 = inline)",
    )
    catalog: str | None = Field(
        default=None,
        description="Custom rule catalog JSON file, relative to the root",
    )
    disabled_rules: list[str] = Field(
        default_factory=list,
        description="Rule ids removed from the active catalog",
    )
    test_modules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TEST_MODULE_GLOBS),
        description="Glob patterns of module ids treated as test modules",
    )
    thresholds: Thresholds = Field(default_factory=Thresholds)
    report: ReportConfig = Field(default_factory=ReportConfig)


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_catalog_path(root: Path, catalog: str) -> Path:
    """Resolve a config-provided catalog path safely within the root.

    The path must be a non-empty relative path that remains within the root
    after resolution. Absolute paths and paths that escape the root are
    rejected.
    """
    if not catalog:
        msg = "catalog must be a non-empty relative path"
        raise ConfigError(msg)

    if catalog.startswith("~"):
        msg = "catalog must be a relative path within the root"
        raise ConfigError(msg)

    catalog_path = Path(catalog)
    if catalog_path.is_absolute():
        msg = "catalog must be a relative path within the root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_catalog = (resolved_root / catalog_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve catalog '{catalog}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_catalog.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"catalog '{catalog}' escapes the root"
        raise ConfigError(msg) from exc

    return resolved_catalog


def load_config(root: Path) -> ConformanceConfig:
    """Load configuration from archguard.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return ConformanceConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Failed to read {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ConformanceConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
