"""Dependency models for module relationships."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DependencySummary(BaseModel):
    """Summary of module graph metrics."""

    node_count: int
    edge_count: int
    cycles: list[list[str]] = Field(default_factory=list)
    fan_in: dict[str, int] = Field(default_factory=dict)
    fan_out: dict[str, int] = Field(default_factory=dict)


__all__ = ["DependencySummary"]
