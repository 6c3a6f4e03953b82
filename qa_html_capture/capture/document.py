"""Index-based element tree built from BeautifulSoup.

The fingerprinter only talks to :class:`ElementNode`; nothing outside this
module touches BeautifulSoup types.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

DOCUMENT_TAG = "#document"


class ElementNode:
    """Read-only view of one element, referencing its relatives by arena index."""

    __slots__ = ("_tree", "index", "tag_name", "attributes", "parent_index",
                 "previous_sibling_index", "_text")

    def __init__(
        self,
        tree: "DocumentTree",
        index: int,
        tag_name: str,
        attributes: dict[str, str],
        parent_index: Optional[int],
        previous_sibling_index: Optional[int],
        text: str,
    ):
        self._tree = tree
        self.index = index
        self.tag_name = tag_name
        self.attributes = attributes
        self.parent_index = parent_index
        self.previous_sibling_index = previous_sibling_index
        self._text = text

    @property
    def parent(self) -> Optional["ElementNode"]:
        if self.parent_index is None:
            return None
        return self._tree.nodes[self.parent_index]

    @property
    def previous_sibling(self) -> Optional["ElementNode"]:
        if self.previous_sibling_index is None:
            return None
        return self._tree.nodes[self.previous_sibling_index]

    def text(self) -> str:
        """Concatenated text of all descendants, untrimmed."""
        return self._text

    def get(self, name: str, default: str = "") -> str:
        return self.attributes.get(name, default)

    @property
    def classes(self) -> list[str]:
        return self.attributes.get("class", "").split()

    def __repr__(self) -> str:
        return f"<ElementNode {self.index} {self.tag_name}>"


class DocumentTree:
    """Arena of element nodes. Index 0 is the parentless document root."""

    def __init__(self, raw_html: str = ""):
        self.raw_html = raw_html
        self.nodes: list[ElementNode] = []
        self._last_child: dict[int, int] = {}
        self.add_node(DOCUMENT_TAG, {}, None, "")

    @property
    def root(self) -> ElementNode:
        return self.nodes[0]

    def add_node(
        self,
        tag_name: str,
        attributes: dict[str, str],
        parent_index: Optional[int],
        text: str = "",
    ) -> ElementNode:
        """Append a node. Nodes must be added in document (pre-)order."""
        index = len(self.nodes)
        previous = self._last_child.get(parent_index) if parent_index is not None else None
        node = ElementNode(self, index, tag_name, attributes, parent_index, previous, text)
        self.nodes.append(node)
        if parent_index is not None:
            self._last_child[parent_index] = index
        return node

    def elements(self) -> Iterator[ElementNode]:
        """Element nodes in document order, excluding the document root."""
        return iter(self.nodes[1:])

    def __len__(self) -> int:
        return len(self.nodes) - 1

    def class_counts(self) -> dict[str, int]:
        """Number of elements carrying each class token."""
        counts: dict[str, int] = {}
        for node in self.elements():
            for cls in set(node.classes):
                counts[cls] = counts.get(cls, 0) + 1
        return counts


def _attribute_map(tag: Tag) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for key, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attrs[key] = "" if value is None else str(value)
    return attrs


def parse_html(html: str, parser: str = "html.parser") -> DocumentTree:
    """Parse raw HTML into a :class:`DocumentTree`.

    Malformed markup is repaired by the parser; an empty string yields a tree
    with only the document root.
    """
    if html is None:
        raise TypeError("parse_html() requires an HTML string, got None")

    soup = BeautifulSoup(html, parser, multi_valued_attributes=None)
    tree = DocumentTree(raw_html=html)
    index_of: dict[int, int] = {id(soup): tree.root.index}

    for tag in soup.descendants:
        if not isinstance(tag, Tag):
            continue
        parent_index = index_of.get(id(tag.parent), tree.root.index)
        node = tree.add_node(tag.name, _attribute_map(tag), parent_index, tag.get_text())
        index_of[id(tag)] = node.index

    logger.debug("Parsed document with %d elements using %s", len(tree), parser)
    return tree
