"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from qa_html_capture.comparator.line_diff import diff_stats
from qa_html_capture.models.comparison import ComparisonResult
from qa_html_capture.models.locator import LocatorReport, UpdatedLocatorReport


def generate_json_report(result: ComparisonResult, output_path: Path) -> None:
    """Write a machine-readable comparison report.

    Raw documents and line blocks are left out; the report carries line
    counts per diff kind instead.
    """
    report = result.model_dump(by_alias=True, exclude={"baseline_html", "current_html", "line_diff"})
    report["line_stats"] = diff_stats(result.line_diff)
    report["differences_by_kind"] = {
        kind: [d.element_key for d in result.differences if d.kind == kind]
        for kind in ("added", "removed", "modified", "moved")
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)


def generate_locator_report(report: LocatorReport | UpdatedLocatorReport, output_path: Path) -> None:
    """Write a locator ranking or locator update report."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report.model_dump(), f, indent=2, default=str)
