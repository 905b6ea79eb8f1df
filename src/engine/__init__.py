"""Conformance engine runs."""

from engine.cancel import CancellationToken, RunCancelled
from engine.run import (
    ConformanceRun,
    RunState,
    RunStateError,
    prepare_run,
    run_conformance,
)

__all__ = [
    "CancellationToken",
    "ConformanceRun",
    "RunCancelled",
    "RunState",
    "RunStateError",
    "prepare_run",
    "run_conformance",
]
