from __future__ import annotations

import pytest

from engine.cancel import CancellationToken, RunCancelled
from model.loader import build_symbol_model
from model.symbols import SymbolModel
from patterns.analyzer import PatternAnalyzer, is_test_module
from report.classifier import classify
from report.findings import Finding
from rules.catalog import Severity, builtin_catalog
from rules.config import ConformanceConfig


def _method(symbol_id: str, **extra: object) -> dict[str, object]:
    return {
        "id": symbol_id,
        "kind": "method",
        "name": symbol_id.rsplit(".", 1)[-1],
        **extra,
    }


def _model(
    symbols: list[dict[str, object]],
    *,
    module_id: str = "Shop.Application",
    test: bool | None = None,
) -> SymbolModel:
    body: dict[str, object] = {"layer": "Application", "symbols": symbols}
    if test is not None:
        body["test"] = test
    return build_symbol_model({"modules": {module_id: body}})


def _analyze(model: SymbolModel, **config: object) -> list[Finding]:
    analyzer = PatternAnalyzer(builtin_catalog(), ConformanceConfig(**config))
    return analyzer.analyze(model)


def _rule_ids(findings: list[Finding]) -> list[str]:
    return sorted(f.rule_id for f in findings)


def test_lowercase_method_name_yields_one_naming_suggestion() -> None:
    findings = _analyze(_model([_method("Shop.Application.OrderService.getOrder")]))

    assert len(findings) == 1
    assert findings[0].rule_id == "naming"
    assert findings[0].severity is Severity.SUGGESTION
    assert findings[0].message.endswith("non-conventional identifiers: getOrder")


def test_deep_nesting_without_length_yields_only_nesting_finding() -> None:
    symbol = _method(
        "Shop.Application.OrderService.Place",
        metrics={"nesting_depth": 4, "line_count": 10},
    )

    findings = _analyze(_model([symbol]))

    assert _rule_ids(findings) == ["complexity-nesting"]
    assert "nests 4 levels deep (limit 3)" in findings[0].message


@pytest.mark.parametrize(("line_count", "expected"), [(50, []), (51, ["complexity-length"])])
def test_method_length_limit_is_exclusive(line_count: int, expected: list[str]) -> None:
    symbol = _method("Shop.Application.S.Run", metrics={"line_count": line_count})

    assert _rule_ids(_analyze(_model([symbol]))) == expected


def test_thresholds_come_from_config() -> None:
    symbol = _method("Shop.Application.S.Run", metrics={"line_count": 30})

    findings = _analyze(_model([symbol]), thresholds={"max_method_lines": 20})

    assert _rule_ids(findings) == ["complexity-length"]


def test_complexity_rules_only_apply_to_methods() -> None:
    symbol = {
        "id": "Shop.Application.S",
        "kind": "type",
        "name": "S",
        "metrics": {"nesting_depth": 9, "line_count": 900},
    }

    assert _analyze(_model([symbol])) == []


def test_too_many_parameters_is_reported() -> None:
    params = ["a", "b", "c", "d", "e", "f"]
    symbol = _method("Shop.Application.S.Run", parameters=params)

    findings = _analyze(_model([symbol]))

    assert _rule_ids(findings) == ["complexity-parameters"]
    assert "takes 6 parameters (limit 5)" in findings[0].message


def test_blocking_async_call_is_critical() -> None:
    flagged = _method("Shop.Application.S.Load", blocks_on_async=True)
    unflagged = _method("Shop.Application.S.Save")

    findings = _analyze(_model([flagged, unflagged]))

    assert len(findings) == 1
    assert findings[0].rule_id == "async-blocking"
    assert findings[0].severity is Severity.CRITICAL
    assert findings[0].subject == "Shop.Application.S.Load"


def test_interface_names_must_start_with_i() -> None:
    good = {"id": "Shop.Application.IClock", "kind": "interface", "name": "IClock"}
    bad = {"id": "Shop.Application.Clock", "kind": "interface", "name": "Clock"}

    findings = _analyze(_model([good, bad]))

    assert [f.subject for f in findings] == ["Shop.Application.Clock"]


def test_parameter_and_local_names_share_one_naming_finding() -> None:
    symbol = _method(
        "Shop.Application.S.Run",
        parameters=["OrderId", "customer"],
        locals=["Total", "_"],
    )

    findings = _analyze(_model([symbol]))

    assert len(findings) == 1
    assert findings[0].message.endswith("identifiers: OrderId, Total")


def test_test_module_methods_use_test_naming_instead_of_pascal_case() -> None:
    symbols = [
        _method("Shop.Application.Tests.S.returns_null_when_order_is_missing"),
        _method("Shop.Application.Tests.S.ShouldReturnNull"),
    ]

    findings = _analyze(_model(symbols, module_id="Shop.Application.Tests"))

    assert len(findings) == 1
    assert findings[0].rule_id == "test-naming"
    assert findings[0].subject == "Shop.Application.Tests.S.ShouldReturnNull"


def test_explicit_test_flag_overrides_glob() -> None:
    model = _model(
        [_method("Shop.Application.Tests.S.ShouldReturnNull")],
        module_id="Shop.Application.Tests",
        test=False,
    )

    assert _rule_ids(_analyze(model)) == []


def test_is_test_module_matches_configured_globs() -> None:
    model = _model([], module_id="Shop.Specs")
    module = model.modules_by_id["Shop.Specs"]

    assert is_test_module(module, ["*.Tests"]) is False
    assert is_test_module(module, ["*.Specs"]) is True


def test_disabled_rule_produces_no_findings() -> None:
    model = _model([_method("Shop.Application.S.getOrder")])
    analyzer = PatternAnalyzer(builtin_catalog().without(["naming"]), ConformanceConfig())

    assert analyzer.analyze(model) == []


def test_sharded_analysis_matches_inline_analysis() -> None:
    modules = {
        f"Shop.M{index}": {
            "layer": "Domain",
            "symbols": [
                _method(f"Shop.M{index}.S.run{index}", metrics={"nesting_depth": 5}),
                _method(f"Shop.M{index}.S.Wait", blocks_on_async=True),
            ],
        }
        for index in range(8)
    }
    model = build_symbol_model({"modules": modules})

    inline = classify(_analyze(model, workers=1))
    sharded = classify(_analyze(model, workers=4))

    assert sharded == inline
    assert len(inline) == 24


def test_cancelled_token_stops_analysis() -> None:
    token = CancellationToken()
    token.cancel()
    analyzer = PatternAnalyzer(builtin_catalog(), ConformanceConfig(workers=2))
    model = build_symbol_model(
        {
            "modules": {
                "A": {"layer": "Domain", "symbols": [_method("A.S.Run")]},
                "B": {"layer": "Domain", "symbols": [_method("B.S.Run")]},
            }
        }
    )

    with pytest.raises(RunCancelled):
        analyzer.analyze(model, token)
