"""
Quote Normalizer — emphasis that wraps a whole quote, doubled quote marks.

Models often italicize an entire line of dialogue (``*"Hello"*``). Dialogue
is never italicized in the canonical form, so the wrapping markers go. The
stage is opt-in: some hosts keep directly emphasized quotes on purpose.
"""

from __future__ import annotations

import re

from format_fixer.services.formatting.markers import map_prose_lines, quote_spans

_DOUBLED_OPEN_RE = re.compile(r'(?<![^\s*])"{2,}(?=[^\s"])')
_DOUBLED_CLOSE_RE = re.compile(r'(?<=[^\s"])"{2,}(?=[\s*.,;:!?)]|\Z)')


def _lone_star(text: str, pos: int, step: int) -> bool:
    """``text[pos]`` is a single ``*`` whose far side is not a word or star."""
    if not 0 <= pos < len(text) or text[pos] != "*":
        return False
    far = pos + step
    if not 0 <= far < len(text):
        return True
    ch = text[far]
    return not (ch.isalnum() or ch in "_*")


def strip_quote_wrapping_emphasis(text: str) -> str:
    """Remove ``*`` markers that touch a quote's outer edge.

    ``*"…"*``, ``*"…"`` and ``"…"*`` all become ``"…"``. Markers separated
    from the quote by narration, and markers inside the quote, are left
    alone.
    """
    drop: set[int] = set()
    for start, end, _closed in quote_spans(text):
        lead = _lone_star(text, start - 1, -1)
        trail = _lone_star(text, end, 1)
        if lead and trail:
            drop.update((start - 1, end))
        elif lead and text[end : end + 1] != "*":
            drop.add(start - 1)
        elif trail and text[start - 1 : start] != "*":
            drop.add(end)
    if not drop:
        return text
    return "".join(ch for i, ch in enumerate(text) if i not in drop)


def _collapse_line(line: str) -> str:
    line = _DOUBLED_OPEN_RE.sub('"', line)
    return _DOUBLED_CLOSE_RE.sub('"', line)


def collapse_consecutive_quote_marks(text: str) -> str:
    """Fold ``""Hello""`` to ``"Hello"``. An empty ``""`` pair is kept."""
    return map_prose_lines(text, _collapse_line)
