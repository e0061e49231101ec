"""Tests for text.py label wrapping."""

from atlas_layout.layout.text import MAX_LABEL_LINES, split_text_into_lines


class TestSplitTextIntoLines:
    """Tests for split_text_into_lines function."""

    def test_short_text_single_line(self):
        """Text that fits stays on one line."""
        assert split_text_into_lines("Harbor", 20) == ["Harbor"]

    def test_greedy_wrap(self):
        """Words are packed greedily up to the line width."""
        assert split_text_into_lines("The Great Hall of Kings", 10) == ["The Great", "Hall of", "Kings"]

    def test_long_word_not_broken(self):
        """A word longer than the width gets its own line."""
        lines = split_text_into_lines("a Supercalifragilistic b", 5)
        assert lines == ["a", "Supercalifragilistic", "b"]

    def test_empty_text(self):
        """Empty or whitespace text gives no lines."""
        assert split_text_into_lines("", 10) == []
        assert split_text_into_lines("   ", 10) == []

    def test_zero_max_lines(self):
        """No lines are returned when none are allowed."""
        assert split_text_into_lines("anything", 10, max_lines=0) == []

    def test_truncates_with_ellipsis(self):
        """Overflowing text keeps max_lines lines, the last one ellipsized."""
        assert split_text_into_lines("alpha beta gamma delta", 5, max_lines=2) == ["alpha", "b..."]

    def test_short_last_line_gets_two_dots(self):
        """A kept line too short for an ellipsis becomes two dots."""
        assert split_text_into_lines("a b c d e", 1, max_lines=2) == ["a", ".."]

    def test_default_max_lines(self):
        """At most MAX_LABEL_LINES lines by default."""
        text = " ".join(["word"] * 20)
        assert len(split_text_into_lines(text, 4)) == MAX_LABEL_LINES

    def test_whitespace_collapsed(self):
        """Runs of whitespace and newlines count as a single separator."""
        assert split_text_into_lines("Old\n  Mill", 20) == ["Old Mill"]
