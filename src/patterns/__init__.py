"""Per-symbol pattern rules."""

from patterns.analyzer import PREDICATES, PatternAnalyzer, PatternContext, is_test_module

__all__ = ["PREDICATES", "PatternAnalyzer", "PatternContext", "is_test_module"]
