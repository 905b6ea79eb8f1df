"""Dependency Graph Analyzer: layer direction and module cycles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from graph.algos import build_dependency_graph, compute_fan_stats, find_cycles
from graph.models import DependencySummary
from report.findings import Finding
from rules.layers import allowed_targets, is_violation

if TYPE_CHECKING:
    from engine.cancel import CancellationToken
    from graph.algos import ModuleGraph
    from model.symbols import Layer, SymbolModel
    from rules.catalog import RuleCatalog

logger = logging.getLogger(__name__)


def _describe_layers(layers: list[Layer]) -> str:
    return ", ".join(layer.value for layer in layers) or "nothing"


class DependencyAnalysis(BaseModel):
    findings: list[Finding] = Field(default_factory=list)
    summary: DependencySummary


def _direction_findings(
    model: SymbolModel, graph: ModuleGraph, catalog: RuleCatalog
) -> tuple[list[Finding], set[str]]:
    rule = catalog.get("architecture")
    findings: list[Finding] = []
    violating_modules: set[str] = set()

    for (source, target), origin in graph.edges.items():
        from_layer = model.layer_of(source)
        to_layer = model.layer_of(target)
        if not is_violation(from_layer, to_layer):
            continue
        violating_modules.add(source)
        if rule is None:
            continue
        findings.append(
            Finding.from_rule(
                rule,
                origin.symbol,
                edge=(source, target),
                from_module=source,
                from_layer=from_layer.value,
                to_module=target,
                to_layer=to_layer.value,
                allowed=_describe_layers(allowed_targets(from_layer)),
                symbol=origin.symbol,
                reference=origin.reference,
            )
        )

    return findings, violating_modules


def _cycle_findings(
    model: SymbolModel, cycles: list[list[str]], catalog: RuleCatalog
) -> list[Finding]:
    rule = catalog.get("architecture-cycle")
    if rule is None:
        return []

    findings: list[Finding] = []
    for cycle in cycles:
        closed = [*cycle, cycle[0]]
        path = " -> ".join(closed)
        layers = " -> ".join(model.layer_of(module).value for module in closed)
        findings.append(
            Finding.from_rule(rule, path, cycle=tuple(cycle), path=path, layers=layers)
        )
    return findings


def _clean_findings(
    model: SymbolModel,
    graph: ModuleGraph,
    catalog: RuleCatalog,
    excluded: set[str],
) -> list[Finding]:
    rule = catalog.get("layering-clean")
    if rule is None:
        return []

    targets_by_module: dict[str, set[str]] = {}
    for source, target in graph.edges:
        targets_by_module.setdefault(source, set()).add(target)

    findings: list[Finding] = []
    for module_id, targets in sorted(targets_by_module.items()):
        if module_id in excluded:
            continue
        layers = sorted({model.layer_of(target).value for target in targets})
        findings.append(
            Finding.from_rule(
                rule,
                module_id,
                module=module_id,
                layer=model.layer_of(module_id).value,
                targets=", ".join(layers),
            )
        )
    return findings


def analyze_dependencies(
    model: SymbolModel,
    catalog: RuleCatalog,
    token: CancellationToken | None = None,
) -> DependencyAnalysis:
    """Build the module graph and report direction violations and cycles."""
    graph = build_dependency_graph(model)
    if token is not None:
        token.raise_if_cancelled()

    direction, violating_modules = _direction_findings(model, graph, catalog)

    cycles = find_cycles(graph.adjacency())
    if token is not None:
        token.raise_if_cancelled()
    cyclic_modules = {module for cycle in cycles for module in cycle}

    findings = [
        *direction,
        *_cycle_findings(model, cycles, catalog),
        *_clean_findings(model, graph, catalog, violating_modules | cyclic_modules),
    ]

    fan_in, fan_out = compute_fan_stats(list(graph.edges))
    summary = DependencySummary(
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        cycles=cycles,
        fan_in=dict(sorted(fan_in.items())),
        fan_out=dict(sorted(fan_out.items())),
    )

    logger.debug(
        "Dependency analysis: %d edges, %d cycles, %d findings",
        summary.edge_count,
        len(cycles),
        len(findings),
    )
    return DependencyAnalysis(findings=findings, summary=summary)


__all__ = ["DependencyAnalysis", "analyze_dependencies"]
