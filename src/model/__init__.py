"""Immutable Symbol Model consumed by the conformance engine."""

from model.loader import ModelLoadError, build_symbol_model, load_symbol_model
from model.symbols import (
    SCHEMA_VERSION,
    Layer,
    Module,
    Symbol,
    SymbolKind,
    SymbolMetrics,
    SymbolModel,
)

__all__ = [
    "SCHEMA_VERSION",
    "Layer",
    "Module",
    "ModelLoadError",
    "Symbol",
    "SymbolKind",
    "SymbolMetrics",
    "SymbolModel",
    "build_symbol_model",
    "load_symbol_model",
]
