from __future__ import annotations

import pytest

from model.symbols import Layer
from rules.layers import PERMITTED_DEPENDENCIES, allowed_targets, is_violation

D = Layer.DOMAIN
APP = Layer.APPLICATION
INFRA = Layer.INFRASTRUCTURE
API = Layer.API


@pytest.mark.parametrize(
    ("from_layer", "to_layer", "expected"),
    [
        (D, APP, True),
        (D, INFRA, True),
        (D, API, True),
        (APP, D, False),
        (APP, INFRA, True),
        (APP, API, True),
        (INFRA, D, False),
        (INFRA, APP, False),
        (INFRA, API, True),
        (API, D, True),
        (API, APP, False),
        (API, INFRA, False),
    ],
)
def test_is_violation_follows_permitted_order_table(
    from_layer: Layer, to_layer: Layer, expected: bool
) -> None:
    assert is_violation(from_layer, to_layer) is expected


@pytest.mark.parametrize("layer", list(Layer))
def test_same_layer_dependency_between_modules_is_a_violation(layer: Layer) -> None:
    assert is_violation(layer, layer) is True


def test_allowed_targets_are_listed_in_layer_order() -> None:
    assert allowed_targets(D) == []
    assert allowed_targets(APP) == [D]
    assert allowed_targets(INFRA) == [D, APP]
    assert allowed_targets(API) == [APP, INFRA]


def test_permitted_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        PERMITTED_DEPENDENCIES[D] = frozenset({API})  # type: ignore[index]
