"""Module dependency graph analysis."""

from graph.algos import build_dependency_graph, find_cycles
from graph.analyzer import DependencyAnalysis, analyze_dependencies
from graph.models import DependencySummary

__all__ = [
    "DependencyAnalysis",
    "DependencySummary",
    "analyze_dependencies",
    "build_dependency_graph",
    "find_cycles",
]
