"""Loading and validation of Symbol Model documents."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from model.symbols import SCHEMA_VERSION, SymbolModel

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ModelLoadError(Exception):
    """Raised when a Symbol Model cannot be loaded; aborts the run."""


def _normalize_modules(raw_modules: Any) -> list[dict[str, Any]]:
    """Turn the ``module id -> body`` mapping into a list of module records."""
    if not isinstance(raw_modules, dict):
        msg = "modules must be a mapping of module id -> module body"
        raise ModelLoadError(msg)

    modules: list[dict[str, Any]] = []
    for module_id, body in raw_modules.items():
        if not isinstance(body, dict):
            msg = f"Module '{module_id}' must be an object"
            raise ModelLoadError(msg)
        if "id" in body and body["id"] != module_id:
            msg = (
                f"Module body declares id '{body['id']}' but is listed under "
                f"'{module_id}'"
            )
            raise ModelLoadError(msg)
        symbols = body.get("symbols", [])
        if not isinstance(symbols, list):
            msg = f"Module '{module_id}': symbols must be a list"
            raise ModelLoadError(msg)
        normalized_symbols = []
        for symbol in symbols:
            if not isinstance(symbol, dict):
                msg = f"Module '{module_id}': every symbol must be an object"
                raise ModelLoadError(msg)
            if "module" in symbol and symbol["module"] != module_id:
                msg = (
                    f"Symbol '{symbol.get('id')}' declares module "
                    f"'{symbol['module']}' but is listed under '{module_id}'"
                )
                raise ModelLoadError(msg)
            normalized_symbols.append({**symbol, "module": module_id})
        modules.append({**body, "id": module_id, "symbols": normalized_symbols})
    return modules


def _check_identifiers(model: SymbolModel) -> None:
    symbol_ids = Counter(
        symbol.id for module in model.modules for symbol in module.symbols
    )
    duplicates = sorted(sid for sid, count in symbol_ids.items() if count > 1)
    if duplicates:
        msg = f"Duplicate symbol identifiers: {', '.join(duplicates)}"
        raise ModelLoadError(msg)

    collisions = sorted(set(symbol_ids) & set(model.modules_by_id))
    if collisions:
        msg = f"Symbol identifiers collide with module identifiers: {', '.join(collisions)}"
        raise ModelLoadError(msg)


def _check_references(model: SymbolModel) -> None:
    for symbol in model.sorted_symbols():
        for reference in symbol.references:
            if model.module_of(reference) is None:
                msg = (
                    f"Symbol '{symbol.id}' references '{reference}', "
                    "which is neither a known symbol nor a known module"
                )
                raise ModelLoadError(msg)


def build_symbol_model(data: Any) -> SymbolModel:
    """Validate a decoded Symbol Model document.

    Raises:
        ModelLoadError: On any malformed input, including unknown layer tags
            and dangling references.
    """
    if not isinstance(data, dict):
        msg = "Symbol Model document must be a JSON object"
        raise ModelLoadError(msg)

    version = data.get("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        msg = f"Unsupported schema_version {version!r} (expected {SCHEMA_VERSION})"
        raise ModelLoadError(msg)

    unknown_keys = sorted(set(data) - {"schema_version", "modules"})
    if unknown_keys:
        msg = f"Unknown top-level keys: {', '.join(unknown_keys)}"
        raise ModelLoadError(msg)

    modules = _normalize_modules(data.get("modules", {}))

    try:
        model = SymbolModel.model_validate(
            {"schema_version": version, "modules": modules}
        )
    except ValidationError as exc:
        msg = f"Invalid Symbol Model: {exc}"
        raise ModelLoadError(msg) from exc

    _check_identifiers(model)
    _check_references(model)

    logger.debug(
        "Loaded symbol model: %d modules, %d symbols",
        len(model.modules),
        len(model.symbols_by_id),
    )
    return model


def load_symbol_model(path: Path) -> SymbolModel:
    """Read and validate a Symbol Model JSON file."""
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as exc:
        msg = f"Failed to read symbol model {path}: {exc}"
        raise ModelLoadError(msg) from exc
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise ModelLoadError(msg) from exc

    return build_symbol_model(raw)


__all__ = ["ModelLoadError", "build_symbol_model", "load_symbol_model"]
