"""Locator candidate and recommendation data structures."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

LocatorKind = Literal["id", "data-attribute", "name", "class", "text", "xpath", "css-hierarchy"]
Reliability = Literal["high", "medium", "low"]


class LocatorCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    selector: str
    kind: LocatorKind
    reliability: Reliability
    priority: int  # 1 (best) to 8 (worst)
    rationale: str = ""


class ElementLocators(BaseModel):
    """Ranked locators for one element of a document."""
    element_key: str
    tag_name: str
    text: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)
    xpath: str = ""
    recommended_locator: Optional[str] = None
    candidates: list[LocatorCandidate] = Field(default_factory=list)


class LocatorReport(BaseModel):
    generated_at: str
    total_elements: int = 0
    elements: list[ElementLocators] = Field(default_factory=list)


class Recommendation(BaseModel):
    """Actionable locator advice for a single element difference."""
    element_key: str
    kind: str  # added, removed, modified, moved
    best_locator: str
    reliability: Reliability
    previous_best_locator: Optional[str] = None
    prior_action: str
    rationale: str
    suggestions: list[str] = Field(default_factory=list)


class UpdatedLocator(BaseModel):
    element_key: str
    change_type: str
    old_locators: list[str] = Field(default_factory=list)
    new_locators: list[str] = Field(default_factory=list)
    description: str = ""
    recommendations: list[str] = Field(default_factory=list)


class UpdatedLocatorReport(BaseModel):
    generated_at: str
    total_changes: int = 0
    change_types: dict[str, int] = Field(default_factory=dict)
    updated_locators: list[UpdatedLocator] = Field(default_factory=list)
