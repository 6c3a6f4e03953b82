"""Element snapshot and baseline data structures."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ElementSnapshot(BaseModel):
    """Captured state of a single element."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tag_name: str = Field(default="", alias="tagName")
    attributes: dict[str, str] = Field(default_factory=dict)
    text: str = ""  # trimmed descendant text
    xpath: str = ""
    css_selector: str = Field(default="", alias="cssSelector")
    locators: list[str] = Field(default_factory=list)


class Baseline(BaseModel):
    """A named snapshot of a document's element structure.

    Field aliases match the on-disk JSON schema so that ``model_dump(by_alias=True)``
    produces ``{id, name, url, timestamp, html, elementMap}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    source_url: str = Field(default="", alias="url")
    captured_at: str = Field(default="", alias="timestamp")  # ISO timestamp
    raw_html: str = Field(default="", alias="html")
    elements: dict[str, ElementSnapshot] = Field(default_factory=dict, alias="elementMap")
    # key: ElementKey, in document order

    @property
    def element_count(self) -> int:
        return len(self.elements)
