"""Symbol Model: immutable modules, symbols and their dependency references.

The model is produced by an external front end and consumed as-is. Every
instance is frozen; an analysis run operates on a single snapshot.
"""

from __future__ import annotations

from enum import Enum
from functools import cached_property
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Schema version constant
SCHEMA_VERSION = 1

SymbolKind = Literal["type", "interface", "method", "property"]


class Layer(str, Enum):
    """Architectural tiers a module can be tagged with."""

    DOMAIN = "Domain"
    APPLICATION = "Application"
    INFRASTRUCTURE = "Infrastructure"
    API = "API"


class SymbolMetrics(BaseModel):
    """Structural metrics measured by the front end."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    nesting_depth: int = Field(default=0, ge=0)
    line_count: int = Field(default=0, ge=0)
    parameter_count: int = Field(default=0, ge=0)


class Symbol(BaseModel):
    """A type, interface, method or property of a module."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    module: str
    kind: SymbolKind
    name: str = Field(min_length=1)
    references: tuple[str, ...] = ()
    metrics: SymbolMetrics = Field(default_factory=SymbolMetrics)
    parameters: tuple[str, ...] = ()
    locals: tuple[str, ...] = ()
    blocks_on_async: bool = Field(
        default=False,
        description="Set by the front end when the symbol blocks on an async result",
    )


class Module(BaseModel):
    """A deployable unit tagged with exactly one layer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    layer: Layer
    symbols: tuple[Symbol, ...] = ()
    test: bool | None = Field(
        default=None,
        description="Explicit test-module flag; None defers to configured globs",
    )


class SymbolModel(BaseModel):
    """A complete, validated snapshot of a codebase."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_version: int = Field(default=SCHEMA_VERSION)
    modules: tuple[Module, ...] = ()

    @cached_property
    def modules_by_id(self) -> dict[str, Module]:
        return {module.id: module for module in self.modules}

    @cached_property
    def symbols_by_id(self) -> dict[str, Symbol]:
        return {
            symbol.id: symbol for module in self.modules for symbol in module.symbols
        }

    def sorted_modules(self) -> list[Module]:
        return sorted(self.modules, key=lambda module: module.id)

    def sorted_symbols(self) -> list[Symbol]:
        return sorted(self.symbols_by_id.values(), key=lambda symbol: symbol.id)

    def module_of(self, reference: str) -> str | None:
        """Resolve a reference (symbol or module identifier) to its module."""
        symbol = self.symbols_by_id.get(reference)
        if symbol is not None:
            return symbol.module
        if reference in self.modules_by_id:
            return reference
        return None

    def layer_of(self, module_id: str) -> Layer:
        return self.modules_by_id[module_id].layer


__all__ = [
    "SCHEMA_VERSION",
    "Layer",
    "Module",
    "Symbol",
    "SymbolKind",
    "SymbolMetrics",
    "SymbolModel",
]
