"""Locator update advice for element differences."""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import Optional

from qa_html_capture.locators.generator import ClassPredicate, best_locator, candidates
from qa_html_capture.models.comparison import ElementDifference
from qa_html_capture.models.locator import Recommendation, UpdatedLocator, UpdatedLocatorReport

logger = logging.getLogger(__name__)

# kind -> (prior_action, rationale)
_ACTIONS: dict[str, tuple[str, str]] = {
    "added": (
        "Add new test coverage",
        "New element added - consider covering it with tests using its best locator",
    ),
    "removed": (
        "Remove or update tests referencing this element",
        "Element was removed - tests locating it will fail",
    ),
    "modified": (
        "Update existing locators",
        "Element modified - switch tests to its most stable locator",
    ),
    "moved": (
        "Update position-dependent locators",
        "Element moved - XPath and hierarchy locators may no longer match",
    ),
}

_SUGGESTIONS: dict[str, list[str]] = {
    "added": [
        "New element added - consider adding test coverage",
        "Update test scripts if this element affects existing functionality",
    ],
    "removed": [
        "Element was removed - update test scripts to handle element absence",
        "Consider adding wait conditions for dynamic content",
    ],
    "modified": [
        "Element modified - verify functionality still works as expected",
        "Update locators to use most stable attributes (ID, data-* attributes)",
    ],
    "moved": [
        "Element moved - XPath locators may need updating",
        "Consider using more stable locators (ID, data-* attributes)",
    ],
}

STABLE_ATTRIBUTE_HINT = (
    "Consider adding stable attributes (ID, data-*) to elements for better test reliability"
)


def _is_stable(locator: str) -> bool:
    return locator.startswith("#") or locator.startswith("[data-")


def suggestions_for(difference: ElementDifference) -> list[str]:
    """Follow-up maintenance suggestions for a difference."""
    suggestions = list(_SUGGESTIONS.get(difference.kind, []))
    if difference.before is not None and difference.after is not None:
        old_stable = [loc for loc in difference.old_locators if _is_stable(loc)]
        new_stable = [loc for loc in difference.new_locators if _is_stable(loc)]
        if not old_stable and new_stable:
            suggestions.append(STABLE_ATTRIBUTE_HINT)
    return suggestions


def advise(
    difference: ElementDifference,
    class_is_unique: Optional[ClassPredicate] = None,
) -> Optional[Recommendation]:
    """Recommend the locator tests should use after a change.

    Returns None for a modified or moved element whose best locator did not
    change, since there is nothing to update.
    """
    target = difference.after or difference.before
    if target is None:
        raise ValueError(f"Difference for '{difference.element_key}' has no element snapshot")

    best = best_locator(candidates(target, class_is_unique))
    previous = None
    if difference.before is not None:
        prior_best = best_locator(candidates(difference.before, class_is_unique))
        previous = prior_best.selector if prior_best else None

    if difference.kind in ("modified", "moved") and previous == best.selector:
        logger.debug("No locator update needed for %s", difference.element_key)
        return None

    prior_action, rationale = _ACTIONS[difference.kind]
    return Recommendation(
        element_key=difference.element_key,
        kind=difference.kind,
        best_locator=best.selector,
        reliability=best.reliability,
        previous_best_locator=previous,
        prior_action=prior_action,
        rationale=rationale,
        suggestions=suggestions_for(difference),
    )


def advise_all(
    differences: list[ElementDifference],
    class_is_unique: Optional[ClassPredicate] = None,
) -> list[Recommendation]:
    recommendations = []
    for diff in differences:
        rec = advise(diff, class_is_unique)
        if rec is not None:
            recommendations.append(rec)
    logger.debug("%d recommendations for %d differences", len(recommendations), len(differences))
    return recommendations


def updated_locators(differences: list[ElementDifference]) -> UpdatedLocatorReport:
    """Old/new locator lists for every difference that has both sides."""
    updated = [
        UpdatedLocator(
            element_key=diff.element_key,
            change_type=diff.kind,
            old_locators=diff.old_locators,
            new_locators=diff.new_locators,
            description=diff.description,
            recommendations=suggestions_for(diff),
        )
        for diff in differences
        if diff.before is not None and diff.after is not None
    ]
    return UpdatedLocatorReport(
        generated_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        total_changes=len(updated),
        change_types=dict(Counter(u.change_type for u in updated)),
        updated_locators=updated,
    )
