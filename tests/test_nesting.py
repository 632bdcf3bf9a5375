"""
Tests for nested emphasis merging and the final line fixups.
"""

from __future__ import annotations

import pytest

from format_fixer.services.formatting.nesting import (
    clean_whitespace,
    fix_line_start_emphasis,
    merge_nested_emphasis,
)

# ===========================================================================
# TestMergeNestedEmphasis
# ===========================================================================


@pytest.mark.unit
class TestMergeNestedEmphasis:
    """Only the outermost italic pair survives."""

    def test_three_markers(self) -> None:
        assert merge_nested_emphasis("*the *dark night*") == "*the dark night*"

    def test_four_markers(self) -> None:
        assert merge_nested_emphasis("*x *y* z*") == "*x y z*"

    def test_quote_untouched(self) -> None:
        text = '*x *y* z* "a *b* c"'
        assert merge_nested_emphasis(text) == '*x y z* "a *b* c"'

    def test_bold_preserved(self) -> None:
        assert merge_nested_emphasis("*a **b** c*") == "*a **b** c*"

    def test_list_line_untouched(self) -> None:
        assert merge_nested_emphasis("1. *a *b* c*") == "1. *a *b* c*"

    def test_wrapping_stars_belong_to_quote(self) -> None:
        text = '*hi* *"q"* *there* *"r"*'
        assert merge_nested_emphasis(text) == text

    def test_multiline_quote_untouched(self) -> None:
        text = '*a *b* c* "x *y*\nz *w*"'
        assert merge_nested_emphasis(text) == '*a b c* "x *y*\nz *w*"'


# ===========================================================================
# TestFixLineStartEmphasis
# ===========================================================================


@pytest.mark.unit
class TestFixLineStartEmphasis:
    """Edge markers pulled onto their words."""

    def test_marker_only_line_emptied(self) -> None:
        assert fix_line_start_emphasis("Text\n**\nMore") == "Text\n\nMore"

    def test_leading_gap(self) -> None:
        assert fix_line_start_emphasis("* Hello*") == "*Hello*"

    def test_trailing_gap(self) -> None:
        assert fix_line_start_emphasis("*Hello *") == "*Hello*"

    def test_separator_kept(self) -> None:
        assert fix_line_start_emphasis("A\n***\nB") == "A\n***\nB"


# ===========================================================================
# TestCleanWhitespace
# ===========================================================================


@pytest.mark.unit
class TestCleanWhitespace:
    """Blank lines, trailing and doubled spaces."""

    def test_excess_newlines(self) -> None:
        assert clean_whitespace("a\n\n\n\nb") == "a\n\nb"

    def test_trailing_and_double_spaces(self) -> None:
        assert clean_whitespace("a  b  \nc") == "a b\nc"

    def test_indentation_kept(self) -> None:
        assert clean_whitespace("x\n  indented") == "x\n  indented"
