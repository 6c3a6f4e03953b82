"""Element fingerprinting: identity keys, XPath/CSS addressing and capture-time locators."""

from __future__ import annotations

import logging
from typing import Optional

from qa_html_capture.capture.document import DocumentTree, ElementNode, parse_html
from qa_html_capture.models.snapshot import ElementSnapshot

logger = logging.getLogger(__name__)

TEXT_LOCATOR_MAX_LENGTH = 50


class IdentityStrategy:
    """Derives the key used to match an element across two documents."""

    def key_for(self, node: ElementNode, index: int) -> str:
        raise NotImplementedError


class PositionalStrategy(IdentityStrategy):
    """Keys every element by document-order index and tag."""

    def key_for(self, node: ElementNode, index: int) -> str:
        return positional_key(node, index)


class IdOrPositionStrategy(IdentityStrategy):
    """The id attribute when present, otherwise the positional key."""

    def key_for(self, node: ElementNode, index: int) -> str:
        return node.get("id") or positional_key(node, index)


def positional_key(node: ElementNode, index: int) -> str:
    return f"element_{index}_{node.tag_name}"


def _sibling_index(node: ElementNode) -> int:
    index = 1
    sibling = node.previous_sibling
    while sibling is not None:
        if sibling.tag_name == node.tag_name:
            index += 1
        sibling = sibling.previous_sibling
    return index


def xpath_literal(value: str) -> str:
    """Quote a string for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    pieces = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in pieces) + ")"


def xpath(node: ElementNode) -> str:
    """Absolute XPath, short-circuiting at the closest ancestor-or-self with an id."""
    parts: list[str] = []
    current: Optional[ElementNode] = node
    while current is not None and current.parent is not None:
        tag = current.tag_name.lower()
        element_id = current.get("id")
        if element_id:
            parts.insert(0, f"//*[@id={xpath_literal(element_id)}]")
            break
        classes = current.classes
        index = _sibling_index(current)
        if classes:
            parts.insert(0, f"{tag}[contains(@class,{xpath_literal(classes[0])})][{index}]")
        else:
            parts.insert(0, f"{tag}[{index}]")
        current = current.parent
    return "/".join(parts) or "/"


def css_selector(node: ElementNode) -> str:
    """Child-combinator CSS path, stopping at the closest ancestor-or-self with an id."""
    parts: list[str] = []
    current: Optional[ElementNode] = node
    while current is not None and current.parent is not None:
        selector = current.tag_name.lower()
        element_id = current.get("id")
        if element_id:
            parts.insert(0, f"{selector}#{element_id}")
            break
        classes = current.classes
        if classes:
            selector += "." + ".".join(classes)
        parts.insert(0, selector)
        current = current.parent
    return " > ".join(parts) or node.tag_name.lower()


def capture_locators(node: ElementNode, text: str) -> list[str]:
    """Locator strings recorded with a snapshot: id, classes, data-*, short text."""
    locators: list[str] = []
    element_id = node.get("id")
    if element_id:
        locators.append(f"#{element_id}")
    for cls in node.classes:
        locators.append(f".{cls}")
    for attr, value in node.attributes.items():
        if attr.startswith("data-"):
            locators.append(f'[{attr}="{value}"]')
    if text and len(text) < TEXT_LOCATOR_MAX_LENGTH:
        locators.append(f"text={text}")
    return locators


def snapshot(node: ElementNode) -> ElementSnapshot:
    text = node.text().strip()
    return ElementSnapshot(
        tag_name=node.tag_name,
        attributes=dict(node.attributes),
        text=text,
        xpath=xpath(node),
        css_selector=css_selector(node),
        locators=capture_locators(node, text),
    )


def fingerprint(
    document: DocumentTree,
    identity: IdentityStrategy | None = None,
) -> dict[str, ElementSnapshot]:
    """Snapshot every element of a document, keyed by identity, in document order.

    When two elements produce the same key (duplicate ids in malformed markup)
    the later one falls back to its positional key.
    """
    if document is None:
        raise TypeError("fingerprint() requires a parsed document, got None")
    identity = identity or IdOrPositionStrategy()

    elements: dict[str, ElementSnapshot] = {}
    for index, node in enumerate(document.elements()):
        key = identity.key_for(node, index)
        if key in elements:
            fallback = positional_key(node, index)
            logger.warning(
                "Duplicate element key '%s' at index %d; using '%s'", key, index, fallback,
            )
            key = fallback
            suffix = 1
            while key in elements:
                suffix += 1
                key = f"{fallback}_{suffix}"
        elements[key] = snapshot(node)

    logger.debug("Fingerprinted %d elements", len(elements))
    return elements


def fingerprint_html(
    html: str,
    parser: str = "html.parser",
    identity: IdentityStrategy | None = None,
) -> dict[str, ElementSnapshot]:
    """Parse and fingerprint a raw HTML string."""
    return fingerprint(parse_html(html, parser), identity)
