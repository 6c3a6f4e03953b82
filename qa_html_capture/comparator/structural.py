"""Classifies element changes between a baseline and a current document."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from qa_html_capture.models.comparison import ComparisonSummary, ElementDifference
from qa_html_capture.models.snapshot import ElementSnapshot

logger = logging.getLogger(__name__)


def describe_changes(before: ElementSnapshot, after: ElementSnapshot) -> list[str]:
    """Human-readable field-level changes between two snapshots of one element."""
    changes: list[str] = []

    if before.tag_name != after.tag_name:
        changes.append(f"Tag changed: {before.tag_name} → {after.tag_name}")

    before_attrs = before.attributes
    after_attrs = after.attributes
    added = [a for a in after_attrs if a not in before_attrs]
    removed = [a for a in before_attrs if a not in after_attrs]
    modified = [a for a in before_attrs if a in after_attrs and before_attrs[a] != after_attrs[a]]
    if added:
        changes.append(f"Added attributes: {', '.join(added)}")
    if removed:
        changes.append(f"Removed attributes: {', '.join(removed)}")
    if modified:
        changes.append(f"Modified attributes: {', '.join(modified)}")

    if before.text.strip() != after.text.strip():
        changes.append(f'Text changed: "{before.text}" → "{after.text}"')

    if before.xpath != after.xpath:
        changes.append(f"XPath changed: {before.xpath} → {after.xpath}")

    return changes


def compare_elements(
    key: str, before: ElementSnapshot, after: ElementSnapshot,
) -> Optional[ElementDifference]:
    """Compare two snapshots sharing a key. Returns None when nothing changed.

    A change is a move when only the position changed: the XPath differs while
    the tag and the full attribute map are the same.
    """
    changes = describe_changes(before, after)
    if not changes:
        return None

    kind = "modified"
    if (
        before.xpath != after.xpath
        and before.tag_name == after.tag_name
        and dict(before.attributes) == dict(after.attributes)
    ):
        kind = "moved"

    return ElementDifference(
        kind=kind,
        element_key=key,
        before=before,
        after=after,
        description="; ".join(changes),
    )


def compare(
    baseline_elements: Mapping[str, ElementSnapshot],
    current_elements: Mapping[str, ElementSnapshot],
) -> tuple[list[ElementDifference], ComparisonSummary]:
    """Compare two element maps keyed by ElementKey.

    Added, modified and moved elements are reported in current-document order,
    followed by removed elements in baseline-document order.
    """
    if baseline_elements is None or current_elements is None:
        raise TypeError("compare() requires two element maps")

    differences: list[ElementDifference] = []

    for key, current in current_elements.items():
        baseline = baseline_elements.get(key)
        if baseline is None:
            differences.append(ElementDifference(
                kind="added",
                element_key=key,
                after=current,
                description=f"New element: {current.tag_name}",
            ))
            continue
        diff = compare_elements(key, baseline, current)
        if diff is not None:
            differences.append(diff)

    for key, baseline in baseline_elements.items():
        if key not in current_elements:
            differences.append(ElementDifference(
                kind="removed",
                element_key=key,
                before=baseline,
                description=f"Removed element: {baseline.tag_name}",
            ))

    summary = ComparisonSummary.from_differences(differences, total_elements=len(current_elements))
    if differences:
        logger.info(
            "Detected %d differences (%d added, %d removed, %d modified, %d moved)",
            summary.total, summary.added, summary.removed, summary.modified, summary.moved,
        )
    else:
        logger.debug("No structural differences")
    return differences, summary
