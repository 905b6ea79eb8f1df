"""Pattern Analyzer: per-symbol naming, complexity, async and test rules."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Callable

from patterns.naming import (
    is_camel_case,
    is_interface_name,
    is_pascal_case,
    is_test_phrase,
)
from report.findings import Finding

if TYPE_CHECKING:
    from collections.abc import Iterable

    from engine.cancel import CancellationToken
    from model.symbols import Module, Symbol, SymbolModel
    from rules.catalog import RuleCatalog
    from rules.config import ConformanceConfig, Thresholds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternContext:
    """Read-only inputs shared by every predicate of one module."""

    catalog: RuleCatalog
    thresholds: Thresholds
    in_test_module: bool


Predicate = Callable[["Symbol", PatternContext], "Finding | None"]


def is_test_module(module: Module, test_globs: Iterable[str]) -> bool:
    """An explicit ``test`` flag wins; otherwise match the module id against globs."""
    if module.test is not None:
        return module.test
    return any(fnmatchcase(module.id, pattern) for pattern in test_globs)


def check_naming(symbol: Symbol, context: PatternContext) -> Finding | None:
    rule = context.catalog.get("naming")
    if rule is None:
        return None

    offenders: list[str] = []
    if symbol.kind == "interface":
        if not is_interface_name(symbol.name):
            offenders.append(symbol.name)
    elif symbol.kind == "method" and context.in_test_module:
        pass
    elif not is_pascal_case(symbol.name):
        offenders.append(symbol.name)

    offenders.extend(
        name for name in (*symbol.parameters, *symbol.locals) if not is_camel_case(name)
    )
    if not offenders:
        return None

    return Finding.from_rule(
        rule,
        symbol.id,
        symbol=symbol.id,
        name=symbol.name,
        kind=symbol.kind,
        identifiers=", ".join(offenders),
    )


def check_method_length(symbol: Symbol, context: PatternContext) -> Finding | None:
    rule = context.catalog.get("complexity-length")
    limit = context.thresholds.max_method_lines
    if rule is None or symbol.kind != "method" or symbol.metrics.line_count <= limit:
        return None
    return Finding.from_rule(
        rule,
        symbol.id,
        symbol=symbol.id,
        name=symbol.name,
        line_count=symbol.metrics.line_count,
        limit=limit,
    )


def check_nesting_depth(symbol: Symbol, context: PatternContext) -> Finding | None:
    rule = context.catalog.get("complexity-nesting")
    limit = context.thresholds.max_nesting_depth
    if rule is None or symbol.kind != "method" or symbol.metrics.nesting_depth <= limit:
        return None
    return Finding.from_rule(
        rule,
        symbol.id,
        symbol=symbol.id,
        name=symbol.name,
        nesting_depth=symbol.metrics.nesting_depth,
        limit=limit,
    )


def check_parameter_count(symbol: Symbol, context: PatternContext) -> Finding | None:
    rule = context.catalog.get("complexity-parameters")
    limit = context.thresholds.max_parameters
    count = symbol.metrics.parameter_count or len(symbol.parameters)
    if rule is None or symbol.kind != "method" or count <= limit:
        return None
    return Finding.from_rule(
        rule,
        symbol.id,
        symbol=symbol.id,
        name=symbol.name,
        parameter_count=count,
        limit=limit,
    )


def check_async_blocking(symbol: Symbol, context: PatternContext) -> Finding | None:
    rule = context.catalog.get("async-blocking")
    # Only the front end's explicit flag counts; unflagged symbols never block.
    if rule is None or not symbol.blocks_on_async:
        return None
    return Finding.from_rule(rule, symbol.id, symbol=symbol.id, name=symbol.name)


def check_test_naming(symbol: Symbol, context: PatternContext) -> Finding | None:
    rule = context.catalog.get("test-naming")
    if (
        rule is None
        or not context.in_test_module
        or symbol.kind != "method"
        or is_test_phrase(symbol.name)
    ):
        return None
    return Finding.from_rule(rule, symbol.id, symbol=symbol.id, name=symbol.name)


PREDICATES: tuple[Predicate, ...] = (
    check_naming,
    check_method_length,
    check_nesting_depth,
    check_parameter_count,
    check_async_blocking,
    check_test_naming,
)


class PatternAnalyzer:
    """Evaluates every predicate against every symbol, sharded per module."""

    def __init__(self, catalog: RuleCatalog, config: ConformanceConfig) -> None:
        self._catalog = catalog
        self._config = config

    def analyze_module(self, module: Module) -> list[Finding]:
        context = PatternContext(
            catalog=self._catalog,
            thresholds=self._config.thresholds,
            in_test_module=is_test_module(module, self._config.test_modules),
        )
        findings: list[Finding] = []
        for symbol in sorted(module.symbols, key=lambda s: s.id):
            for predicate in PREDICATES:
                finding = predicate(symbol, context)
                if finding is not None:
                    findings.append(finding)
        return findings

    def analyze(
        self, model: SymbolModel, token: CancellationToken | None = None
    ) -> list[Finding]:
        modules = model.sorted_modules()
        workers = self._config.workers
        findings: list[Finding] = []

        if workers <= 1 or len(modules) <= 1:
            for module in modules:
                if token is not None:
                    token.raise_if_cancelled()
                findings.extend(self.analyze_module(module))
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self.analyze_module, module) for module in modules
                ]
                try:
                    for future in futures:
                        if token is not None:
                            token.raise_if_cancelled()
                        findings.extend(future.result())
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        logger.debug(
            "Pattern analysis: %d modules, %d findings (workers=%d)",
            len(modules),
            len(findings),
            workers,
        )
        return findings


__all__ = [
    "PREDICATES",
    "PatternAnalyzer",
    "PatternContext",
    "check_async_blocking",
    "check_method_length",
    "check_naming",
    "check_nesting_depth",
    "check_parameter_count",
    "check_test_naming",
    "is_test_module",
]
