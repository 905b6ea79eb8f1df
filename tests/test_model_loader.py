from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from model.loader import ModelLoadError, build_symbol_model, load_symbol_model
from model.symbols import Layer

FIXTURES = Path(__file__).parent / "fixtures"


def _document(modules: dict[str, dict[str, object]]) -> dict[str, object]:
    return {"schema_version": 1, "modules": modules}


def test_load_fixture_assigns_owning_module_and_layer() -> None:
    model = load_symbol_model(FIXTURES / "shop_model.json")

    load = model.symbols_by_id["Shop.Infrastructure.SqlOrderRepository.Load"]

    assert load.module == "Shop.Infrastructure"
    assert model.layer_of("Shop.Api") is Layer.API
    assert load.references == ("Shop.Domain.Order", "Shop.Api.OrdersController")
    assert [m.id for m in model.sorted_modules()][0] == "Shop.Api"


def test_references_resolve_to_symbols_or_modules() -> None:
    model = build_symbol_model(
        _document(
            {
                "A.Domain": {
                    "layer": "Domain",
                    "symbols": [{"id": "A.Domain.Order", "kind": "type", "name": "Order"}],
                },
                "A.Application": {
                    "layer": "Application",
                    "symbols": [
                        {
                            "id": "A.Application.Handler",
                            "kind": "type",
                            "name": "Handler",
                            "references": ["A.Domain", "A.Domain.Order"],
                        }
                    ],
                },
            }
        )
    )

    assert model.module_of("A.Domain") == "A.Domain"
    assert model.module_of("A.Domain.Order") == "A.Domain"
    assert model.module_of("Nope") is None


def test_unknown_layer_tag_is_fatal() -> None:
    with pytest.raises(ModelLoadError, match="Invalid Symbol Model"):
        build_symbol_model(_document({"A.Ui": {"layer": "Presentation"}}))


def test_dangling_reference_is_fatal() -> None:
    document = _document(
        {
            "A.Domain": {
                "layer": "Domain",
                "symbols": [
                    {
                        "id": "A.Domain.Order",
                        "kind": "type",
                        "name": "Order",
                        "references": ["A.Missing.Thing"],
                    }
                ],
            }
        }
    )

    with pytest.raises(ModelLoadError, match="neither a known symbol nor a known module"):
        build_symbol_model(document)


def test_duplicate_symbol_ids_are_fatal() -> None:
    symbol = {"id": "A.Shared", "kind": "type", "name": "Shared"}
    document = _document(
        {
            "A.Domain": {"layer": "Domain", "symbols": [symbol]},
            "A.Application": {"layer": "Application", "symbols": [symbol]},
        }
    )

    with pytest.raises(ModelLoadError, match="Duplicate symbol identifiers: A.Shared"):
        build_symbol_model(document)


def test_symbol_id_colliding_with_module_id_is_fatal() -> None:
    document = _document(
        {
            "A.Domain": {
                "layer": "Domain",
                "symbols": [{"id": "A.Domain", "kind": "type", "name": "Domain"}],
            }
        }
    )

    with pytest.raises(ModelLoadError, match="collide"):
        build_symbol_model(document)


@pytest.mark.parametrize(
    "symbol",
    [
        {"id": "A.X", "kind": "field", "name": "X"},
        {"id": "A.X", "kind": "type", "name": "X", "metrics": {"line_count": -1}},
        {"id": "A.X", "kind": "type", "name": "X", "colour": "blue"},
        {"id": "A.X", "kind": "type"},
    ],
)
def test_malformed_symbols_are_fatal(symbol: dict[str, object]) -> None:
    with pytest.raises(ModelLoadError):
        build_symbol_model(_document({"A": {"layer": "Domain", "symbols": [symbol]}}))


def test_symbol_listed_under_another_module_is_fatal() -> None:
    symbol = {"id": "A.X", "kind": "type", "name": "X", "module": "B"}

    with pytest.raises(ModelLoadError, match="declares module 'B'"):
        build_symbol_model(_document({"A": {"layer": "Domain", "symbols": [symbol]}}))


def test_unsupported_schema_version_is_fatal() -> None:
    with pytest.raises(ModelLoadError, match="schema_version"):
        build_symbol_model({"schema_version": 99, "modules": {}})


def test_modules_must_be_a_mapping() -> None:
    with pytest.raises(ModelLoadError, match="mapping"):
        build_symbol_model({"modules": [{"id": "A", "layer": "Domain"}]})


def test_unknown_top_level_key_is_fatal() -> None:
    with pytest.raises(ModelLoadError, match="Unknown top-level keys: extras"):
        build_symbol_model({"modules": {}, "extras": True})


def test_invalid_json_file_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "model.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ModelLoadError, match="Invalid JSON"):
        load_symbol_model(path)


def test_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ModelLoadError, match="Failed to read"):
        load_symbol_model(tmp_path / "absent.json")


def test_loaded_model_is_immutable() -> None:
    model = load_symbol_model(FIXTURES / "clean_model.json")
    module = model.modules_by_id["Billing.Domain"]

    with pytest.raises(ValidationError):
        module.layer = Layer.API  # type: ignore[misc]


def test_module_body_with_conflicting_id_is_fatal() -> None:
    with pytest.raises(ModelLoadError, match="declares id 'B'"):
        build_symbol_model(_document({"A": {"id": "B", "layer": "Domain"}}))


def test_module_body_repeating_its_own_id_is_accepted() -> None:
    model = build_symbol_model(_document({"A": {"id": "A", "layer": "Domain"}}))

    assert [module.id for module in model.modules] == ["A"]
