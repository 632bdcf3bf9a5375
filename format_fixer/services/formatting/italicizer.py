"""
Narration Italicizer — wrap every narration segment in one italic pair.

Quotes, placeholders and list lines go back exactly as they were scanned.
"""

from __future__ import annotations

import re
from bisect import bisect_right

from format_fixer.models.format import Segment
from format_fixer.services.formatting.markers import (
    has_alnum,
    quote_spans,
    quote_wrap,
    single_marker_positions,
)
from format_fixer.services.formatting.protector import PLACEHOLDER_RE

_LEADING_PUNCT_RE = re.compile(r"[,.;:!?)\]—-]+")
_INNER_ITALIC_RE = re.compile(r"(?<![*\w])\*(?![*\s])([^*\n]+?)(?<![*\s])\*(?![*\w])")
_LONE_MARKER_RE = re.compile(r"(?<!\*)\*(?!\*)")
_DOUBLE_SPACE_RE = re.compile(r"(?<=\S)[ \t]{2,}")


def _edge_run(text: str, leading: bool) -> int:
    stripped = text.lstrip("*") if leading else text.rstrip("*")
    return len(text) - len(stripped)


def is_wrapped(text: str) -> bool:
    """Opens and closes on an italic marker (``*`` or ``***``)."""
    lead, trail = _edge_run(text, True), _edge_run(text, False)
    return lead in (1, 3) and trail in (1, 3) and len(text) > lead + trail


def _drop_stray_edge_marker(text: str) -> str:
    if len(single_marker_positions(text)) % 2 == 0:
        return text
    if _edge_run(text, True) % 2:
        return text[1:]
    if _edge_run(text, False) % 2:
        return text[:-1]
    return text


def _quoted_ranges(text: str) -> list[tuple[int, int]]:
    """Quoted spans in ``text``, widened over any stars that wrap them."""
    ranges: list[tuple[int, int]] = []
    for start, end, closed in quote_spans(text):
        wrap = quote_wrap(text, start, end) if closed else 0
        if ranges and start - wrap < ranges[-1][1]:
            wrap = 0
        ranges.append((start - wrap, end + wrap))
    return ranges


def _in_ranges(ranges: list[tuple[int, int]], starts: list[int], pos: int) -> bool:
    i = bisect_right(starts, pos) - 1
    return i >= 0 and pos < ranges[i][1]


def _resolve_inner(text: str, ranges: list[tuple[int, int]]) -> str:
    # Italics touching an edge were partial narration styling and merge into
    # the wrap; italics in the middle are nested emphasis and turn bold.
    # Dialogue inside the narration keeps its own markers.
    starts = [start for start, _ in ranges]

    def _sub(match: re.Match[str]) -> str:
        if _in_ranges(ranges, starts, match.start()):
            return match.group(0)
        if match.start() == 0 or match.end() == len(text):
            return match.group(1)
        return f"**{match.group(1)}**"

    return _INNER_ITALIC_RE.sub(_sub, text)


def _drop_lone_markers(text: str) -> str:
    ranges = _quoted_ranges(text)
    starts = [start for start, _ in ranges]
    return _LONE_MARKER_RE.sub(
        lambda m: m.group(0) if _in_ranges(ranges, starts, m.start()) else "", text
    )


def italicize_narration(text: str) -> str:
    """Return ``text`` wrapped in exactly one italic level."""
    if is_wrapped(text):
        return text
    text = _drop_stray_edge_marker(text)
    text = _resolve_inner(text, _quoted_ranges(text))
    text = _drop_lone_markers(text)
    text = _DOUBLE_SPACE_RE.sub(" ", text).strip()
    return f"*{text}*"


# =============================================================================
# REASSEMBLY
# =============================================================================


def _ends_with_space(out: list[str]) -> bool:
    for piece in reversed(out):
        if piece:
            return piece[-1].isspace()
    return True


def _append(out: list[str], piece: str) -> None:
    if piece[:1] in (" ", "\t") and _ends_with_space(out):
        piece = piece.lstrip(" \t")
    out.append(piece)


def _rstrip(out: list[str]) -> None:
    while out:
        stripped = out[-1].rstrip(" \t")
        if stripped:
            out[-1] = stripped
            return
        out.pop()


def _glued_to(prev: Segment | None, seg: Segment) -> bool:
    return (
        prev is not None
        and prev.kind in ("quote", "opaque")
        and not prev.raw[-1:].isspace()
        and not seg.raw[:1].isspace()
    )


def _append_narration(out: list[str], seg: Segment, prev: Segment | None, nxt: Segment | None) -> None:
    text = seg.text
    if not text.strip("*"):
        return
    if not has_alnum(PLACEHOLDER_RE.sub("", text)):
        _append(out, seg.raw)
        return

    # '"Hi", she said' keeps the comma against the quote.
    if _glued_to(prev, seg):
        match = _LEADING_PUNCT_RE.match(text)
        if match:
            out.append(match.group(0))
            text = text[match.end() :].lstrip()

    if not _ends_with_space(out):
        out.append(" ")
    out.append(italicize_narration(text))
    if nxt is not None and nxt.kind != "paragraph_break":
        out.append(" ")


def italicize(segments: list[Segment]) -> str:
    """Reassemble segments with every narration run in italics."""
    out: list[str] = []
    prev: Segment | None = None
    for i, seg in enumerate(segments):
        nxt = segments[i + 1] if i + 1 < len(segments) else None
        if seg.kind == "paragraph_break":
            _rstrip(out)
            out.append(seg.raw)
        elif seg.kind == "narration":
            _append_narration(out, seg, prev, nxt)
        else:
            _append(out, seg.raw)
        prev = seg
    return "".join(out).strip()
