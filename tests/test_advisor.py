"""Tests for the locator update advisor."""

import pytest

from qa_html_capture.capture.fingerprinter import fingerprint_html
from qa_html_capture.comparator.structural import compare
from qa_html_capture.locators.advisor import (
    STABLE_ATTRIBUTE_HINT,
    advise,
    advise_all,
    suggestions_for,
    updated_locators,
)
from qa_html_capture.models.comparison import ElementDifference
from qa_html_capture.models.snapshot import Baseline


def _differences(baseline_html: str, current_html: str):
    differences, _ = compare(fingerprint_html(baseline_html), fingerprint_html(current_html))
    return differences


class TestAdvise:
    """Tests for advise()."""

    def test_added_element(self):
        [diff] = _differences("", '<button id="buy">Buy</button>')
        rec = advise(diff)
        assert rec.kind == "added"
        assert rec.best_locator == "#buy"
        assert rec.reliability == "high"
        assert rec.prior_action == "Add new test coverage"
        assert rec.previous_best_locator is None

    def test_removed_element_uses_before(self):
        [diff] = _differences('<div class="card">X</div>', "")
        rec = advise(diff)
        assert rec.kind == "removed"
        assert rec.best_locator == ".card"
        assert rec.previous_best_locator == ".card"
        assert "Remove" in rec.prior_action

    def test_modified_with_new_data_attribute(self):
        [diff] = _differences(
            '<input name="email">',
            '<input name="email" data-testid="email-input">',
        )
        rec = advise(diff)
        assert rec.kind == "modified"
        assert rec.previous_best_locator == '[name="email"]'
        assert rec.best_locator == '[data-testid="email-input"]'
        assert rec.reliability == "high"
        assert rec.prior_action == "Update existing locators"

    def test_modified_without_best_locator_change_is_skipped(self):
        [diff] = _differences('<p id="intro">Hello</p>', '<p id="intro">Goodbye</p>')
        assert diff.kind == "modified"
        assert advise(diff) is None

    def test_difference_without_snapshots_is_an_error(self):
        diff = ElementDifference(kind="added", element_key="x")
        with pytest.raises(ValueError):
            advise(diff)

    def test_rationale_is_fixed_per_kind(self):
        first = advise(_differences("", "<a>One</a>")[0])
        second = advise(_differences("", "<span>Two</span>")[0])
        assert first.rationale == second.rationale


class TestSuggestions:
    """Tests for suggestions_for() and updated_locators()."""

    def test_stable_attribute_hint(self):
        [diff] = _differences('<input name="email">', '<input name="email" data-testid="e">')
        assert STABLE_ATTRIBUTE_HINT in suggestions_for(diff)

    def test_no_hint_when_already_stable(self):
        [diff] = _differences('<p data-x="1">a</p>', '<p data-x="1">b</p>')
        assert STABLE_ATTRIBUTE_HINT not in suggestions_for(diff)

    def test_advise_all_filters_unchanged_locators(self):
        differences = _differences(
            '<p id="intro">Hello</p>',
            '<p id="intro">Goodbye</p><button id="new">New</button>',
        )
        recommendations = advise_all(differences)
        assert [r.element_key for r in recommendations] == ["new"]

    def test_updated_locators_only_for_matched_elements(self):
        differences = _differences(
            '<input name="email"><div class="old">x</div>',
            '<input name="email" data-testid="e">',
        )
        report = updated_locators(differences)
        assert report.total_changes == 1
        assert report.change_types == {"modified": 1}
        entry = report.updated_locators[0]
        assert entry.element_key == "element_0_input"
        assert entry.old_locators == []
        assert entry.new_locators == ['[data-testid="e"]']


class TestSparseSnapshots:
    """Stored elements may carry nothing but a tag name."""

    def test_removed_element_without_xpath(self):
        baseline = Baseline.model_validate({
            "id": "1", "name": "n", "elementMap": {"element_0_span": {"tagName": "span"}},
        })
        differences, _ = compare(baseline.elements, {})
        [rec] = advise_all(differences)
        assert rec.kind == "removed"
        assert rec.best_locator == "/"
        assert rec.reliability == "low"
