"""Greedy line diff of two raw documents, used for side-by-side presentation.

The matcher is myopic rather than a full LCS: it consumes the longest equal
run at the cursors, then the runs of lines that never reappear in the other
side. Unequal delete/insert runs are paired positionally into ``replace``
blocks, so an insertion inside a changed region can show up as replaced
lines.
"""

from __future__ import annotations

import logging
from typing import Sequence

from qa_html_capture.models.comparison import LineBlock

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def _unmatched_run(lines: Sequence[str], start: int, other: Sequence[str], other_start: int) -> int:
    """Count lines from ``start`` that do not occur anywhere in ``other[other_start:]``."""
    remainder = set(other[other_start:])
    count = 0
    while start + count < len(lines) and lines[start + count] not in remainder:
        count += 1
    return count


def diff_lines(a: Sequence[str], b: Sequence[str]) -> list[LineBlock]:
    blocks: list[LineBlock] = []
    i = j = 0

    while i < len(a) or j < len(b):
        common = 0
        while i + common < len(a) and j + common < len(b) and a[i + common] == b[j + common]:
            common += 1
        if common:
            blocks.append(LineBlock(kind="equal", count=common, lines=list(a[i:i + common])))
            i += common
            j += common
            continue

        delete_count = _unmatched_run(a, i, b, j)
        insert_count = _unmatched_run(b, j, a, i)

        if delete_count and insert_count:
            n = min(delete_count, insert_count)
            blocks.append(LineBlock(
                kind="replace", count=n,
                before_lines=list(a[i:i + n]), after_lines=list(b[j:j + n]),
            ))
            i += n
            j += n
        elif delete_count:
            blocks.append(LineBlock(kind="delete", count=delete_count, lines=list(a[i:i + delete_count])))
            i += delete_count
        elif insert_count:
            blocks.append(LineBlock(kind="insert", count=insert_count, lines=list(b[j:j + insert_count])))
            j += insert_count
        else:
            # Crossed lines: a[i] reappears later in b and b[j] later in a.
            blocks.append(LineBlock(kind="delete", count=1, lines=[a[i]]))
            i += 1

    logger.debug("Line diff: %d blocks for %d/%d lines", len(blocks), len(a), len(b))
    return blocks


def reconstruct_after(blocks: Sequence[LineBlock]) -> list[str]:
    """Rebuild the second sequence from equal, insert and replace blocks."""
    lines: list[str] = []
    for block in blocks:
        if block.kind in ("equal", "insert"):
            lines.extend(block.lines)
        elif block.kind == "replace":
            lines.extend(block.after_lines)
    return lines


def reconstruct_before(blocks: Sequence[LineBlock]) -> list[str]:
    """Rebuild the first sequence from equal, delete and replace blocks."""
    lines: list[str] = []
    for block in blocks:
        if block.kind in ("equal", "delete"):
            lines.extend(block.lines)
        elif block.kind == "replace":
            lines.extend(block.before_lines)
    return lines


def diff_stats(blocks: Sequence[LineBlock]) -> dict[str, int]:
    """Line counts per block kind."""
    stats = {"equal": 0, "delete": 0, "insert": 0, "replace": 0}
    for block in blocks:
        stats[block.kind] += block.count
    return stats
