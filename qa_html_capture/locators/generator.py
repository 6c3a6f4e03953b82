"""Enumerates and ranks locator candidates for an element.

Candidates come from a fixed priority table (lower number = more stable):

    1  id              high
    2  data-*          high    one per data attribute
    3  name            medium
    4  class           medium  class carried by a single element
    5  text            medium  short text of interactive elements only
    6  class           low     class shared with other elements
    7  xpath           low     always available
    8  css-hierarchy   medium  only when not a duplicate selector
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from qa_html_capture.capture.document import DocumentTree
from qa_html_capture.capture.fingerprinter import (
    TEXT_LOCATOR_MAX_LENGTH,
    IdentityStrategy,
    fingerprint,
)
from qa_html_capture.models.locator import ElementLocators, LocatorCandidate, LocatorReport
from qa_html_capture.models.snapshot import ElementSnapshot

logger = logging.getLogger(__name__)

INTERACTIVE_TAGS = frozenset({"button", "a", "input", "select", "textarea", "option"})

ClassPredicate = Callable[[str], bool]


def _never_unique(class_name: str) -> bool:
    return False


def candidates(
    element: ElementSnapshot,
    class_is_unique: Optional[ClassPredicate] = None,
) -> list[LocatorCandidate]:
    """Return all locator candidates for an element, best first."""
    class_is_unique = class_is_unique or _never_unique
    attrs = element.attributes
    found: list[LocatorCandidate] = []

    element_id = attrs.get("id")
    if element_id:
        found.append(LocatorCandidate(
            selector=f"#{element_id}", kind="id", reliability="high", priority=1,
            rationale="Unique ID attribute",
        ))

    for attr, value in attrs.items():
        if attr.startswith("data-"):
            found.append(LocatorCandidate(
                selector=f'[{attr}="{value}"]', kind="data-attribute", reliability="high",
                priority=2, rationale="Test-friendly data attribute",
            ))

    name = attrs.get("name")
    if name:
        found.append(LocatorCandidate(
            selector=f'[name="{name}"]', kind="name", reliability="medium", priority=3,
            rationale="Form element name attribute",
        ))

    for cls in attrs.get("class", "").split():
        if class_is_unique(cls):
            found.append(LocatorCandidate(
                selector=f".{cls}", kind="class", reliability="medium", priority=4,
                rationale="Unique class name",
            ))
        else:
            found.append(LocatorCandidate(
                selector=f".{cls}", kind="class", reliability="low", priority=6,
                rationale="Non-unique class name",
            ))

    text = element.text.strip()
    if text and len(text) < TEXT_LOCATOR_MAX_LENGTH and element.tag_name.lower() in INTERACTIVE_TAGS:
        found.append(LocatorCandidate(
            selector=f"text={text}", kind="text", reliability="medium", priority=5,
            rationale="Interactive element with short visible text",
        ))

    found.append(LocatorCandidate(
        selector=element.xpath or "/", kind="xpath", reliability="low", priority=7,
        rationale="XPath fallback - fragile to DOM changes",
    ))

    emitted = {c.selector for c in found}
    if element.css_selector and element.css_selector not in emitted:
        found.append(LocatorCandidate(
            selector=element.css_selector, kind="css-hierarchy", reliability="medium",
            priority=8, rationale="CSS selector hierarchy",
        ))

    # sorted() is stable, so equal priorities keep declaration order
    return sorted(found, key=lambda c: c.priority)


def best_locator(ranked: list[LocatorCandidate]) -> Optional[LocatorCandidate]:
    """The lowest-priority-number candidate; the first one on ties."""
    if not ranked:
        return None
    return min(ranked, key=lambda c: c.priority)


def class_uniqueness(document: DocumentTree) -> ClassPredicate:
    """Predicate telling whether a class token is carried by exactly one element."""
    counts = document.class_counts()
    return lambda class_name: counts.get(class_name, 0) == 1


def generate_locators(
    document: DocumentTree,
    identity: IdentityStrategy | None = None,
) -> LocatorReport:
    """Rank locators for every element of a document."""
    is_unique = class_uniqueness(document)
    elements: list[ElementLocators] = []
    for key, element in fingerprint(document, identity).items():
        ranked = candidates(element, is_unique)
        best = best_locator(ranked)
        elements.append(ElementLocators(
            element_key=key,
            tag_name=element.tag_name,
            text=element.text,
            attributes=dict(element.attributes),
            xpath=element.xpath,
            recommended_locator=best.selector if best else None,
            candidates=ranked,
        ))

    logger.info("Generated locators for %d elements", len(elements))
    return LocatorReport(
        generated_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        total_elements=len(elements),
        elements=elements,
    )
