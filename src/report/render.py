"""Report rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from report.classifier import Report


def report_payload(report: Report) -> dict[str, object]:
    payload = report.model_dump(mode="json")
    payload["exit_status"] = report.exit_status
    payload["counts"] = report.counts()
    return payload


def render_json(report: Report) -> bytes:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(report_payload(report), option=opts) + b"\n"


def render_text(report: Report) -> str:
    lines = [
        f"[{finding.severity.value}] {finding.rule_id} {finding.subject}: {finding.message}"
        for finding in report.findings
    ]
    counts = report.counts()
    summary = ", ".join(f"{count} {severity}" for severity, count in counts.items())
    lines.append(
        f"{len(report.findings)} findings ({summary}); exit status {report.exit_status}"
    )
    return "\n".join(lines) + "\n"


def render(report: Report, fmt: str) -> bytes:
    if fmt == "json":
        return render_json(report)
    if fmt == "text":
        return render_text(report).encode("utf-8")
    msg = f"Unsupported report format: {fmt}"
    raise ValueError(msg)


__all__ = ["render", "render_json", "render_text", "report_payload"]
