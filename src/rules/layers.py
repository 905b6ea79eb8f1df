"""Permitted layer dependency table and violation checks."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from model.symbols import Layer

if TYPE_CHECKING:
    from collections.abc import Mapping

# Layer -> layers it may depend on. Static, read-only for the process lifetime.
PERMITTED_DEPENDENCIES: Mapping[Layer, frozenset[Layer]] = MappingProxyType(
    {
        Layer.DOMAIN: frozenset(),
        Layer.APPLICATION: frozenset({Layer.DOMAIN}),
        Layer.INFRASTRUCTURE: frozenset({Layer.APPLICATION, Layer.DOMAIN}),
        Layer.API: frozenset({Layer.APPLICATION, Layer.INFRASTRUCTURE}),
    }
)


def allowed_targets(from_layer: Layer) -> list[Layer]:
    """Layers ``from_layer`` may depend on, in table order."""
    permitted = PERMITTED_DEPENDENCIES[from_layer]
    return [layer for layer in Layer if layer in permitted]


def is_violation(from_layer: Layer, to_layer: Layer) -> bool:
    """Check if a dependency between two distinct modules breaks the layer order.

    Only edges listed in the table are permitted, so two modules sharing a
    layer may not depend on each other.
    """
    return to_layer not in PERMITTED_DEPENDENCIES[from_layer]


__all__ = ["PERMITTED_DEPENDENCIES", "allowed_targets", "is_violation"]
