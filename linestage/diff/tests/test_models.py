"""Unit tests for the diff models."""

import pytest
from pydantic import ValidationError

from linestage.diff.models import (
    BinaryDiff,
    Diff,
    DiffHunk,
    DiffLine,
    DiffLineType,
    HunkHeader,
)
from linestage.diff.parser import parse_diff
from linestage.diff.tests.fixtures import TWO_HUNK_DIFF


class TestDiffLine:
    """Tests for DiffLine."""

    def test_added_line_has_no_old_number(self):
        """Added lines reject an old line number."""
        with pytest.raises(ValidationError):
            DiffLine(
                line_type=DiffLineType.ADDED,
                text="x",
                old_line_number=1,
                new_line_number=1,
            )

    def test_removed_line_has_no_new_number(self):
        """Removed lines reject a new line number."""
        with pytest.raises(ValidationError):
            DiffLine(line_type=DiffLineType.REMOVED, text="x", new_line_number=1)

    def test_context_line_needs_both_numbers(self):
        """Context lines exist in both versions."""
        with pytest.raises(ValidationError):
            DiffLine(line_type=DiffLineType.CONTEXT, text="x", old_line_number=1)

    def test_lines_are_immutable(self):
        """Parsed lines cannot be modified in place."""
        line = DiffLine(line_type=DiffLineType.ADDED, text="x", new_line_number=1)

        with pytest.raises(ValidationError):
            line.text = "y"

    def test_render(self):
        """Rendering restores the marker and end-of-file note."""
        line = DiffLine(
            line_type=DiffLineType.REMOVED,
            text="  old",
            old_line_number=3,
            no_trailing_newline=True,
        )

        assert line.render() == "-  old\n\\ No newline at end of file"
        assert line.is_change
        assert line.in_old and not line.in_new


class TestHunkHeader:
    """Tests for HunkHeader.render."""

    def test_render_with_counts(self):
        header = HunkHeader(old_start=1, old_count=3, new_start=1, new_count=4)
        assert header.render() == "@@ -1,3 +1,4 @@"

    def test_render_omits_single_counts(self):
        header = HunkHeader(old_start=5, old_count=1, new_start=6, new_count=1)
        assert header.render() == "@@ -5 +6 @@"

    def test_render_keeps_zero_counts_and_section(self):
        header = HunkHeader(
            old_start=0, old_count=0, new_start=1, new_count=2, section="class A:"
        )
        assert header.render() == "@@ -0,0 +1,2 @@ class A:"


class TestDiff:
    """Tests for Diff helpers."""

    def test_changed_lines_use_global_indices(self):
        """Changed lines are numbered across hunks, context is skipped."""
        diff = parse_diff(TWO_HUNK_DIFF)

        changed = list(diff.changed_lines())

        assert [index for index, _ in changed] == [0, 1]
        assert [line.text for _, line in changed] == ["b", "k"]
        assert diff.changed_line_count == 2

    def test_hunk_counts(self):
        """Hunk helpers count each side."""
        hunk = parse_diff(TWO_HUNK_DIFF).hunks[1]

        assert hunk.old_line_count == 3
        assert hunk.new_line_count == 2
        assert hunk.has_changes
        assert [line.text for line in hunk.changed_lines] == ["k"]

    def test_empty_hunk_list(self):
        assert Diff().is_empty
        assert Diff().changed_line_count == 0

    def test_binary_flag(self):
        """The two outcomes are told apart by is_binary."""
        assert BinaryDiff().is_binary is True
        assert Diff().is_binary is False

    def test_hunk_render(self):
        hunk = DiffHunk(
            header=HunkHeader(old_start=1, old_count=1, new_start=1, new_count=2),
            lines=(
                DiffLine(
                    line_type=DiffLineType.CONTEXT,
                    text="a",
                    old_line_number=1,
                    new_line_number=1,
                ),
                DiffLine(line_type=DiffLineType.ADDED, text="b", new_line_number=2),
            ),
        )

        assert hunk.render() == "@@ -1 +1,2 @@\n a\n+b"
