"""
Nested Emphasis Merger and the final line-level fixups.

After italicizing, a narration span can still carry three or more italic
markers, the trace of broken nesting such as ``*the *dark night*``. Only
the outermost pair is kept; bold runs inside are untouched.
"""

from __future__ import annotations

import re

from format_fixer.services.formatting.markers import (
    map_prose_lines,
    map_quoted,
    single_marker_positions,
)
from format_fixer.services.formatting.protector import split_placeholders

_DOUBLE_SPACE_RE = re.compile(r"(?<=\S)[ \t]{2,}")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_LEADING_MARKER_GAP_RE = re.compile(r"^([ \t]*\*+)[ \t]+(?=\S)")
_TRAILING_MARKER_GAP_RE = re.compile(r"(?<=\S)[ \t]+(\*+)[ \t]*$")


# =============================================================================
# NESTED EMPHASIS
# =============================================================================


def _merge_span(span: str) -> str:
    positions = single_marker_positions(span)
    if len(positions) < 3:
        return span
    drop = set(positions[1:-1])
    merged = "".join(ch for i, ch in enumerate(span) if i not in drop)
    return _DOUBLE_SPACE_RE.sub(" ", merged)


def merge_nested_emphasis(text: str) -> str:
    """Collapse 3+ italic markers in one narration span to a single pair.

    Spans are bounded by quotes, placeholders and line ends. Stars wrapping
    a whole quote belong to the quote.
    """
    return map_quoted(
        text,
        lambda fragment: split_placeholders(fragment, _merge_span),
        lambda quote: quote,
    )


# =============================================================================
# LINE FIXUPS
# =============================================================================


def _fix_line(line: str) -> str:
    if line.strip() and not line.strip().strip("*"):
        return ""
    line = _LEADING_MARKER_GAP_RE.sub(r"\1", line)
    return _TRAILING_MARKER_GAP_RE.sub(r"\1", line)


def fix_line_start_emphasis(text: str) -> str:
    """Drop marker-only lines; pull edge markers onto the words they wrap."""
    return map_prose_lines(text, _fix_line)


def _clean_line(line: str) -> str:
    return _DOUBLE_SPACE_RE.sub(" ", line.rstrip())


def clean_whitespace(text: str) -> str:
    """At most one blank line, no trailing spaces, single spaces between words."""
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return map_prose_lines(text, _clean_line).strip()
