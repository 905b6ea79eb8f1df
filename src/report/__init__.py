"""Severity classification and report rendering."""

from report.classifier import (
    EXIT_CRITICAL,
    EXIT_OK,
    Report,
    build_report,
    classify,
    exit_status,
)
from report.findings import Finding
from report.render import render, render_json, render_text

__all__ = [
    "EXIT_CRITICAL",
    "EXIT_OK",
    "Finding",
    "Report",
    "build_report",
    "classify",
    "exit_status",
    "render",
    "render_json",
    "render_text",
]
