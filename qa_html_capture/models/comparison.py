"""Comparison result data structures produced by the comparator."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from qa_html_capture.models.locator import Recommendation
from qa_html_capture.models.snapshot import ElementSnapshot

DifferenceKind = Literal["added", "removed", "modified", "moved"]
LineBlockKind = Literal["equal", "delete", "insert", "replace"]


class ElementDifference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DifferenceKind
    element_key: str
    before: Optional[ElementSnapshot] = None
    after: Optional[ElementSnapshot] = None
    description: str = ""

    @property
    def old_xpath(self) -> Optional[str]:
        return self.before.xpath if self.before else None

    @property
    def new_xpath(self) -> Optional[str]:
        return self.after.xpath if self.after else None

    @property
    def old_locators(self) -> list[str]:
        return list(self.before.locators) if self.before else []

    @property
    def new_locators(self) -> list[str]:
        return list(self.after.locators) if self.after else []

    @property
    def locators_changed(self) -> bool:
        """True when both sides exist and their locator sets differ."""
        if self.before is None or self.after is None:
            return False
        return set(self.before.locators) != set(self.after.locators)


class ComparisonSummary(BaseModel):
    total: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    moved: int = 0
    locator_changes: int = 0
    total_elements: int = 0  # elements in the current document

    @classmethod
    def from_differences(
        cls, differences: list[ElementDifference], total_elements: int = 0,
    ) -> "ComparisonSummary":
        counts = {"added": 0, "removed": 0, "modified": 0, "moved": 0}
        locator_changes = 0
        for diff in differences:
            counts[diff.kind] += 1
            if diff.kind in ("modified", "moved") and diff.locators_changed:
                locator_changes += 1
        return cls(
            total=len(differences),
            locator_changes=locator_changes,
            total_elements=total_elements,
            **counts,
        )

    @property
    def has_changes(self) -> bool:
        return self.total > 0


class LineBlock(BaseModel):
    """One block of a line diff.

    ``equal``/``delete``/``insert`` blocks carry ``lines``; ``replace`` blocks
    carry ``before_lines`` and ``after_lines`` of equal length ``count``.
    """
    model_config = ConfigDict(frozen=True)

    kind: LineBlockKind
    count: int
    lines: list[str] = Field(default_factory=list)
    before_lines: list[str] = Field(default_factory=list)
    after_lines: list[str] = Field(default_factory=list)


class ComparisonResult(BaseModel):
    baseline_id: str
    baseline_name: str
    baseline_html: str = ""
    current_html: str = ""
    current_url: str = ""
    compared_at: str = ""  # ISO timestamp
    differences: list[ElementDifference] = Field(default_factory=list)
    summary: ComparisonSummary = Field(default_factory=ComparisonSummary)
    line_diff: list[LineBlock] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
