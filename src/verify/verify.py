"""Determinism verification for conformance reports."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from engine.run import run_conformance
from report.render import render_json

if TYPE_CHECKING:
    from model.symbols import SymbolModel
    from rules.catalog import RuleCatalog
    from rules.config import ConformanceConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    digests: tuple[str, ...] = field(default_factory=tuple)
    mismatches: tuple[int, ...] = field(default_factory=tuple)


def verify_determinism(
    model: SymbolModel,
    catalog: RuleCatalog,
    config: ConformanceConfig | None = None,
    *,
    runs: int = 2,
) -> DeterminismResult:
    """Verify that repeated runs over one snapshot render identical reports.

    Each run is rendered to JSON and compared byte-for-byte against the
    first run.

    Args:
        model: Symbol Model snapshot to analyze.
        catalog: Active rule catalog.
        config: Optional run configuration.
        runs: Number of runs to compare (at least 2).

    Returns:
        DeterminismResult with the SHA-256 digest of every run and the
        indexes of runs whose output differs from run 0.

    Raises:
        ValueError: If fewer than two runs are requested.
    """
    if runs < 2:
        msg = f"Determinism check needs at least 2 runs, got {runs}"
        raise ValueError(msg)

    outputs = [
        render_json(run_conformance(model, catalog, config)) for _ in range(runs)
    ]
    digests = tuple(hashlib.sha256(output).hexdigest() for output in outputs)
    mismatches = tuple(
        index for index, output in enumerate(outputs) if output != outputs[0]
    )
    return DeterminismResult(ok=not mismatches, digests=digests, mismatches=mismatches)


__all__ = ["DeterminismResult", "verify_determinism"]
