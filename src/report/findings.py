"""Finding model shared by both analyzers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from rules.catalog import ReviewPriority, RuleCategory, Severity

if TYPE_CHECKING:
    from rules.catalog import Rule


class Finding(BaseModel):
    """A single reported rule violation (or WellDone note)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rule_id: str
    severity: Severity
    category: RuleCategory
    priority: ReviewPriority
    subject: str
    message: str
    edge: tuple[str, str] | None = None
    cycle: tuple[str, ...] | None = None

    @classmethod
    def from_rule(
        cls,
        rule: Rule,
        subject: str,
        *,
        edge: tuple[str, str] | None = None,
        cycle: tuple[str, ...] | None = None,
        **fields: Any,
    ) -> Finding:
        return cls(
            rule_id=rule.id,
            severity=rule.severity,
            category=rule.category,
            priority=rule.priority,
            subject=subject,
            message=rule.render(**fields),
            edge=edge,
            cycle=cycle,
        )

    def sort_key(self) -> tuple[int, int, str, str, str]:
        return (
            self.severity.rank,
            self.priority.rank,
            self.subject,
            self.rule_id,
            self.message,
        )


__all__ = ["Finding"]
