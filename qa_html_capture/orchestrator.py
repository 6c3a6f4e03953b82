"""Pipeline orchestrator — coordinates capture, comparison, locator advice and reporting."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from qa_html_capture.capture.document import parse_html
from qa_html_capture.capture.fingerprinter import fingerprint
from qa_html_capture.comparator.line_diff import diff_lines, split_lines
from qa_html_capture.comparator.structural import compare
from qa_html_capture.locators.advisor import advise_all, updated_locators
from qa_html_capture.locators.generator import class_uniqueness, generate_locators
from qa_html_capture.models.comparison import ComparisonResult
from qa_html_capture.models.config import CaptureConfig
from qa_html_capture.models.locator import LocatorReport, UpdatedLocatorReport
from qa_html_capture.models.snapshot import Baseline
from qa_html_capture.reporter.json_report import generate_json_report, generate_locator_report
from qa_html_capture.store.baseline_store import BaselineStore, save_comparison

logger = logging.getLogger(__name__)


def _now() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


class Orchestrator:
    """Coordinates the capture → compare → advise pipeline."""

    def __init__(self, config: CaptureConfig):
        self.config = config
        self.store = BaselineStore(config.baselines_dir)

    def capture_baseline(self, html: str, name: str, url: str = "") -> Baseline:
        """Fingerprint a document and store it as a new baseline."""
        start = time.time()
        document = parse_html(html, self.config.parser)
        baseline = Baseline(
            id=self.store.new_baseline_id(),
            name=name,
            source_url=url or self.config.default_url(),
            captured_at=_now(),
            raw_html=html,
            elements=fingerprint(document),
        )
        self.store.save(baseline)
        logger.info("Captured baseline '%s' with %d elements in %.2fs",
                    name, baseline.element_count, time.time() - start)
        return baseline

    def compare_with_baseline(self, baseline_id: str, html: str, url: str = "") -> ComparisonResult:
        """Compare a document against a stored baseline.

        Raises BaselineNotFoundError / BaselineReadError from the store.
        """
        baseline = self.store.get(baseline_id)
        return self.compare_documents(baseline, html, url)

    def compare_documents(self, baseline: Baseline, html: str, url: str = "") -> ComparisonResult:
        start = time.time()
        logger.debug("Comparing against baseline '%s' (%s)", baseline.name, baseline.id)

        document = parse_html(html, self.config.parser)
        current_elements = fingerprint(document)
        differences, summary = compare(baseline.elements, current_elements)
        line_blocks = diff_lines(split_lines(baseline.raw_html), split_lines(html))
        recommendations = advise_all(differences, class_uniqueness(document))

        result = ComparisonResult(
            baseline_id=baseline.id,
            baseline_name=baseline.name,
            baseline_html=baseline.raw_html,
            current_html=html,
            current_url=url,
            compared_at=_now(),
            differences=differences,
            summary=summary,
            line_diff=line_blocks,
            recommendations=recommendations,
        )

        if self.config.save_comparisons:
            save_comparison(result, self.config.comparisons_dir)

        logger.info("Comparison with '%s' complete: %d differences in %.2fs",
                    baseline.name, summary.total, time.time() - start)
        return result

    def generate_locators(self, html: str) -> LocatorReport:
        return generate_locators(parse_html(html, self.config.parser))

    def updated_locators(self, result: ComparisonResult) -> UpdatedLocatorReport:
        return updated_locators(result.differences)

    def write_comparison_report(self, result: ComparisonResult, output_dir: Path | None = None) -> Path:
        out_dir = Path(output_dir or self.config.report_output_dir)
        path = out_dir / f"comparison_{result.baseline_id}_{int(time.time() * 1000)}.json"
        generate_json_report(result, path)
        logger.info("JSON report: %s", path)
        return path

    def write_locator_report(
        self, report: LocatorReport | UpdatedLocatorReport, output_path: Path | None = None,
    ) -> Path:
        path = Path(output_path) if output_path else (
            Path(self.config.report_output_dir) / f"locators_{int(time.time() * 1000)}.json"
        )
        generate_locator_report(report, path)
        logger.info("Locator report: %s", path)
        return path
