"""
Emphasis Promoter — single-word promotion and malformed marker cleanup.

Pass order matters. ``collapse_excess_markers`` leaves no run longer than
three stars, ``remove_unpaired_double_markers`` leaves no dangling ``**``,
``remove_lone_asterisks_in_quotes`` leaves quotes with paired markers only,
and the spacing passes assume all three.
"""

from __future__ import annotations

import re

from format_fixer.services.formatting.markers import (
    has_alnum,
    map_prose_lines,
    map_quoted,
    quote_spans,
    star_runs,
)
from format_fixer.services.formatting.protector import split_placeholders

_SINGLE_WORD_RE = re.compile(r"(?<![*\w])\*([\w'-]+[.,!?;:]?)\*(?![*\w])")
_EXCESS_MARKERS_RE = re.compile(r"\*{4,}")
_DOUBLE_SPACE_RE = re.compile(r"(?<=\S)[ \t]{2,}")

_MARKER_SPACING_RE = re.compile(
    r"(?<![*\w])\*(?!\*)([ \t]*)([^*\n]*?[^*\s])([ \t]*)(?<!\*)\*(?![*\w])"
)


# =============================================================================
# PROMOTION
# =============================================================================


def _promote(run: str) -> str:
    return _SINGLE_WORD_RE.sub(r"**\1**", run)


def _promote_narration(run: str) -> str:
    # A run made of nothing but one-word italics ("*nods*") is a finished beat.
    if not has_alnum(_SINGLE_WORD_RE.sub("", run)):
        return run
    return _promote(run)


def promote_single_words(text: str, include_quotes: bool = False) -> str:
    """Turn ``*word*`` nested in narration into ``**word**``.

    Quoted dialogue, closed or not, keeps its italics unless
    ``include_quotes`` is set.
    """
    return map_quoted(
        text,
        lambda fragment: split_placeholders(fragment, _promote_narration),
        _promote if include_quotes else (lambda quote: quote),
    )


# =============================================================================
# MALFORMED MARKERS
# =============================================================================


def collapse_excess_markers(text: str) -> str:
    """Any run of four or more stars becomes ``***``."""
    return _EXCESS_MARKERS_RE.sub("***", text)


def _glued(line: str, start: int, end: int) -> bool:
    """``left**right``: a closing and an opening italic marker, not bold."""
    return (
        start > 0
        and end < len(line)
        and line[start - 1].isalnum()
        and line[end].isalnum()
    )


def _strip_unpaired_doubles(line: str) -> str:
    candidates = [
        (start, end)
        for start, end in star_runs(line)
        if end - start in (2, 3) and not (end - start == 2 and _glued(line, start, end))
    ]
    if not candidates:
        return line

    # (start, end, replacement) for every run or gap that changes
    edits: list[tuple[int, int, str]] = []
    i = 0
    while i < len(candidates):
        start, end = candidates[i]
        if i + 1 < len(candidates):
            next_start, next_end = candidates[i + 1]
            inner = line[end:next_start]
            body = inner.strip()
            if body and "*" not in inner:
                if inner != body:
                    # "*** scene ***": same-size runs around padded text pull in.
                    if next_end - next_start != end - start:
                        edits.append((start, end, "*" if end - start == 3 else ""))
                        i += 1
                        continue
                    edits.append((end, next_start, body))
                i += 2
                continue
        # An orphaned "***" still carries an italic marker.
        edits.append((start, end, "*" if end - start == 3 else ""))
        i += 1

    if not edits:
        return line

    out: list[str] = []
    last = 0
    for start, end, replacement in edits:
        out.append(line[last:start])
        out.append(replacement)
        last = end
    out.append(line[last:])
    return _DOUBLE_SPACE_RE.sub(" ", "".join(out))


def remove_unpaired_double_markers(text: str) -> str:
    """Drop ``**`` markers that have no partner on their line.

    Pairs are taken left to right. A bold run is kept only when a later one
    exists and the text between them is non-empty and marker-free. Padding
    inside a pair of equal runs is trimmed; a padded pair of unequal runs
    is not a pair.
    """
    return map_prose_lines(text, _strip_unpaired_doubles)


def _unpaired_quote_markers(content: str) -> list[int]:
    opener: int | None = None
    unpaired: list[int] = []
    for start, end in star_runs(content):
        if end - start != 1:
            continue
        before = content[start - 1] if start > 0 else " "
        after = content[end] if end < len(content) else " "
        if opener is not None and not before.isspace():
            opener = None
        elif not after.isspace():
            if opener is not None:
                unpaired.append(opener)
            opener = start
        else:
            unpaired.append(start)
    if opener is not None:
        unpaired.append(opener)
    return unpaired


def _clean_quote(quote: str) -> str:
    closed = len(quote) > 1 and quote.endswith('"')
    content = quote[1:-1] if closed else quote[1:]
    unpaired = set(_unpaired_quote_markers(content))
    if not unpaired:
        return quote
    content = "".join(ch for i, ch in enumerate(content) if i not in unpaired)
    return '"' + _DOUBLE_SPACE_RE.sub(" ", content) + ('"' if closed else "")


def remove_lone_asterisks_in_quotes(text: str) -> str:
    """Remove broken single markers inside dialogue.

    A marker that cannot open (nothing follows it) or close (nothing
    precedes it, or nothing is open) is a fragment and goes.
    """
    return map_quoted(text, lambda fragment: fragment, _clean_quote)


# =============================================================================
# SPACING
# =============================================================================


def _tighten_markers(match: re.Match[str]) -> str:
    if not match.group(1) and not match.group(3):
        return match.group(0)
    return f"*{match.group(2)}*"


def normalize_marker_spacing(text: str) -> str:
    """``* text *`` -> ``*text*``."""
    return map_prose_lines(text, lambda line: _MARKER_SPACING_RE.sub(_tighten_markers, line))


def normalize_quote_spacing(text: str) -> str:
    """``" Hello "`` -> ``"Hello"``.

    One space is kept outside a side whose trimmed space touched a word.
    Unclosed quotes are left alone.
    """
    out: list[str] = []
    last = 0
    for start, end, closed in quote_spans(text):
        if not closed:
            continue
        content = text[start + 1 : end - 1]
        body = content.strip(" \t")
        if not body or body == content:
            continue
        lead = content[: len(content) - len(content.lstrip(" \t"))]
        trail = content[len(content.rstrip(" \t")) :]
        before = " " if lead and start > 0 and text[start - 1].isalnum() else ""
        after = " " if trail and end < len(text) and text[end].isalnum() else ""
        out.append(text[last:start])
        out.append(f'{before}"{body}"{after}')
        last = end
    out.append(text[last:])
    return "".join(out)
