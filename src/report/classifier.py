"""Severity Classifier: deterministic ordering and the exit-status contract."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from graph.models import DependencySummary
from report.findings import Finding
from rules.catalog import Severity

if TYPE_CHECKING:
    from collections.abc import Iterable

# Report schema version constant
SCHEMA_VERSION = 1

EXIT_OK = 0
EXIT_CRITICAL = 1


def classify(findings: Iterable[Finding]) -> list[Finding]:
    """Order findings by severity, review priority, then offending identifier."""
    return sorted(findings, key=Finding.sort_key)


def exit_status(findings: Iterable[Finding]) -> int:
    """Non-zero when at least one Critical finding is present."""
    if any(finding.severity is Severity.CRITICAL for finding in findings):
        return EXIT_CRITICAL
    return EXIT_OK


class Report(BaseModel):
    """Ordered findings of one run."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = Field(default=SCHEMA_VERSION)
    findings: tuple[Finding, ...] = ()
    graph: DependencySummary | None = None

    @property
    def exit_status(self) -> int:
        return exit_status(self.findings)

    def counts(self) -> dict[str, int]:
        counts = {severity.value: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts


def build_report(
    findings: Iterable[Finding], graph: DependencySummary | None = None
) -> Report:
    return Report(findings=tuple(classify(findings)), graph=graph)


__all__ = [
    "EXIT_CRITICAL",
    "EXIT_OK",
    "SCHEMA_VERSION",
    "Report",
    "build_report",
    "classify",
    "exit_status",
]
