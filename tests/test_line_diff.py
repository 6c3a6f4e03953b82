"""Tests for the greedy line diff."""

import pytest

from qa_html_capture.comparator.line_diff import (
    diff_lines,
    diff_stats,
    reconstruct_after,
    reconstruct_before,
    split_lines,
)


def _shape(blocks):
    return [(b.kind, b.count) for b in blocks]


class TestDiffLines:
    """Tests for diff_lines()."""

    def test_identical(self):
        blocks = diff_lines(["a", "b"], ["a", "b"])
        assert _shape(blocks) == [("equal", 2)]

    def test_both_empty(self):
        assert diff_lines([], []) == []

    def test_single_line_change_is_replace(self):
        blocks = diff_lines(["x", "y", "z"], ["x", "Y", "z"])
        assert _shape(blocks) == [("equal", 1), ("replace", 1), ("equal", 1)]
        assert blocks[1].before_lines == ["y"]
        assert blocks[1].after_lines == ["Y"]

    def test_pure_insertion(self):
        blocks = diff_lines(["a", "c"], ["a", "b", "c"])
        assert _shape(blocks) == [("equal", 1), ("insert", 1), ("equal", 1)]
        assert blocks[1].lines == ["b"]

    def test_pure_deletion(self):
        blocks = diff_lines(["a", "b", "c"], ["a", "c"])
        assert _shape(blocks) == [("equal", 1), ("delete", 1), ("equal", 1)]

    def test_into_empty(self):
        assert _shape(diff_lines([], ["a", "b"])) == [("insert", 2)]
        assert _shape(diff_lines(["a", "b"], [])) == [("delete", 2)]

    def test_replace_pairs_positionally(self):
        # Insertion inside a changed region is reported as replaced lines.
        blocks = diff_lines(["h", "old1", "old2", "f"], ["h", "new1", "ins", "new2", "f"])
        assert _shape(blocks) == [("equal", 1), ("replace", 2), ("insert", 1), ("equal", 1)]
        assert blocks[1].before_lines == ["old1", "old2"]
        assert blocks[1].after_lines == ["new1", "ins"]

    def test_crossed_lines_terminate(self):
        blocks = diff_lines(["x", "y"], ["y", "x"])
        assert _shape(blocks) == [("delete", 1), ("equal", 1), ("insert", 1)]


class TestReconstruction:
    """Reading the blocks back reproduces both inputs."""

    @pytest.mark.parametrize("a, b", [
        (["a", "b", "c"], ["a", "b", "c"]),
        (["x", "y", "z"], ["x", "Y", "z"]),
        (["h", "old1", "old2", "f"], ["h", "new1", "ins", "new2", "f"]),
        (["x", "y"], ["y", "x"]),
        (["1", "2", "3", "4"], ["4", "3", "2", "1"]),
        ([], ["only"]),
        (["only"], []),
        (["a", "a", "b"], ["b", "a", "a", "a"]),
    ])
    def test_round_trip(self, a, b):
        blocks = diff_lines(a, b)
        assert reconstruct_after(blocks) == b
        assert reconstruct_before(blocks) == a

    def test_html_documents(self, login_html):
        changed = login_html.replace('class="field"', 'class="field" data-testid="email"')
        blocks = diff_lines(split_lines(login_html), split_lines(changed))
        assert reconstruct_after(blocks) == split_lines(changed)
        stats = diff_stats(blocks)
        assert stats["replace"] == 1
        assert stats["equal"] == len(split_lines(login_html)) - 1
