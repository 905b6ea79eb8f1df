"""Engine run: Loaded -> Analyzed -> Reported."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import TYPE_CHECKING

from graph.analyzer import analyze_dependencies
from model.loader import load_symbol_model
from patterns.analyzer import PatternAnalyzer
from report.classifier import build_report
from rules.catalog import load_catalog
from rules.config import ConformanceConfig, load_config, resolve_catalog_path

if TYPE_CHECKING:
    from pathlib import Path

    from engine.cancel import CancellationToken
    from graph.models import DependencySummary
    from model.symbols import SymbolModel
    from report.classifier import Report
    from report.findings import Finding
    from rules.catalog import RuleCatalog

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    LOADED = "Loaded"
    ANALYZED = "Analyzed"
    REPORTED = "Reported"


class RunStateError(Exception):
    """Raised on an illegal engine run state transition."""


class ConformanceRun:
    """A single analysis run over an immutable Symbol Model snapshot.

    Construction puts the run in ``Loaded``; ``analyze`` moves it to
    ``Analyzed`` and ``report`` to ``Reported``. There are no backward
    transitions and each step runs once.
    """

    def __init__(
        self,
        model: SymbolModel,
        catalog: RuleCatalog,
        config: ConformanceConfig | None = None,
        *,
        token: CancellationToken | None = None,
    ) -> None:
        self.model = model
        self.catalog = catalog
        self.config = config or ConformanceConfig()
        self._token = token
        self._findings: list[Finding] = []
        self._summary: DependencySummary | None = None
        self._report: Report | None = None
        self.state = RunState.LOADED

    def _require(self, expected: RunState, action: str) -> None:
        if self.state is not expected:
            msg = f"Cannot {action} a run in state {self.state.value}"
            raise RunStateError(msg)

    def analyze(self) -> list[Finding]:
        """Run both analyzers concurrently and collect their findings."""
        self._require(RunState.LOADED, "analyze")

        patterns = PatternAnalyzer(self.catalog, self.config)
        with ThreadPoolExecutor(max_workers=2) as executor:
            dependency_future = executor.submit(
                analyze_dependencies, self.model, self.catalog, self._token
            )
            pattern_future = executor.submit(patterns.analyze, self.model, self._token)
            dependency_analysis = dependency_future.result()
            pattern_findings = pattern_future.result()

        self._summary = dependency_analysis.summary
        self._findings = [*dependency_analysis.findings, *pattern_findings]
        self.state = RunState.ANALYZED
        logger.debug("Run analyzed: %d findings", len(self._findings))
        return list(self._findings)

    def report(self) -> Report:
        """Order the collected findings and emit the report."""
        self._require(RunState.ANALYZED, "report")
        self._report = build_report(self._findings, self._summary)
        self.state = RunState.REPORTED
        return self._report


def prepare_run(
    model_path: Path,
    *,
    root: Path,
    config: ConformanceConfig | None = None,
    catalog_path: Path | None = None,
    token: CancellationToken | None = None,
) -> ConformanceRun:
    """Load config, catalog and Symbol Model; any failure here is fatal.

    Raises:
        ConfigError: If archguard.toml is invalid.
        CatalogError: If the rule catalog is invalid.
        ModelLoadError: If the Symbol Model is malformed.
    """
    if config is None:
        config = load_config(root)

    if catalog_path is None and config.catalog is not None:
        catalog_path = resolve_catalog_path(root, config.catalog)

    catalog = load_catalog(catalog_path, disabled=config.disabled_rules)
    model = load_symbol_model(model_path)
    return ConformanceRun(model, catalog, config, token=token)


def run_conformance(
    model: SymbolModel,
    catalog: RuleCatalog,
    config: ConformanceConfig | None = None,
    *,
    token: CancellationToken | None = None,
) -> Report:
    """Analyze and report in one call."""
    run = ConformanceRun(model, catalog, config, token=token)
    run.analyze()
    return run.report()


__all__ = [
    "ConformanceRun",
    "RunState",
    "RunStateError",
    "prepare_run",
    "run_conformance",
]
