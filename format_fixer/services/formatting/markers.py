"""
Shared marker helpers for the formatting passes.

Star runs, list-line detection and the per-line mapping used to keep
enumerated choice lists out of every emphasis pass, and the quoted-span
scan shared by the quote-aware passes.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator

STAR_RUN_RE = re.compile(r"\*+")

# "1. Fight", "2> Run", "A) Hide", "b. Talk", plus "- item" / "* item" bullets.
# Scene separators ("***", "* * *") count too. A star bullet never ends its
# line with a star; that shape is spaced emphasis.
LIST_LINE_RE = re.compile(
    r"[ \t]*(?:"
    r"(?:[-*_][ \t]*){3,}$"
    r"|(?:\d{1,3}|[A-Za-z])[.>)](?=\s|$)"
    r"|[-+][ \t]+(?=\S)"
    r"|\*[ \t]+(?=\S)(?!.*\*[ \t]*$)"
    r")",
    re.MULTILINE,
)


def is_list_line(line: str) -> bool:
    return LIST_LINE_RE.match(line) is not None


def map_prose_lines(text: str, fn: Callable[[str], str]) -> str:
    """Apply ``fn`` to every line that is not a list line."""
    return "\n".join(
        line if is_list_line(line) else fn(line) for line in text.split("\n")
    )


def star_runs(text: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) of every maximal run of ``*``."""
    for match in STAR_RUN_RE.finditer(text):
        yield match.start(), match.end()


def single_marker_positions(text: str) -> list[int]:
    """Positions of italic markers: lone stars plus the italic half of ``***``.

    For a triple run the italic star sits on the outside: first star when
    the run opens onto content, last star otherwise.
    """
    positions: list[int] = []
    for start, end in star_runs(text):
        length = end - start
        if length == 1:
            positions.append(start)
        elif length == 3:
            opens = end < len(text) and not text[end].isspace()
            positions.append(start if opens else end - 1)
    return positions


def has_alnum(text: str) -> bool:
    return any(ch.isalnum() for ch in text)


# =============================================================================
# QUOTED SPANS
# =============================================================================


def _is_word(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def quote_spans(text: str) -> list[tuple[int, int, bool]]:
    """(start, end, closed) of every quoted span, in order.

    A quote may run onto following lines that hold no ``"`` until a line
    with an odd quote count, whose first ``"`` closes it. A blank line, a
    list line or a line with an even quote count ends the search and the
    quote is left unclosed at the end of its opening line. List lines are
    never scanned.
    """
    spans: list[tuple[int, int, bool]] = []
    pending: tuple[int, int] | None = None
    offset = 0
    for line in text.split("\n"):
        scan_from = 0
        list_line = is_list_line(line)

        if pending is not None:
            start, open_end = pending
            count = line.count('"')
            if not line.strip() or list_line or (count and count % 2 == 0):
                spans.append((start, open_end, False))
                pending = None
            elif count:
                close = line.index('"')
                spans.append((start, offset + close + 1, True))
                pending = None
                scan_from = close + 1
            else:
                offset += len(line) + 1
                continue

        if not list_line:
            pos = line.find('"', scan_from)
            while pos != -1:
                close = line.find('"', pos + 1)
                if close == -1:
                    pending = (offset + pos, offset + len(line))
                    break
                spans.append((offset + pos, offset + close + 1, True))
                pos = line.find('"', close + 1)
        offset += len(line) + 1

    if pending is not None:
        spans.append((pending[0], pending[1], False))
    return spans


def quote_wrap(text: str, start: int, end: int) -> int:
    """Length of the matching star run wrapping a closed quote, or 0.

    ``*"Hi"*`` and ``**"Hi"**`` count; runs of different length, runs
    longer than three, and runs glued to a word do not.
    """
    lead = 0
    while lead < 3 and start - lead > 0 and text[start - lead - 1] == "*":
        lead += 1
    if not lead or (start - lead > 0 and text[start - lead - 1] == "*"):
        return 0
    if text[end : end + lead] != "*" * lead or text[end + lead : end + lead + 1] == "*":
        return 0
    before = text[start - lead - 1] if start - lead > 0 else " "
    after = text[end + lead] if end + lead < len(text) else " "
    if _is_word(before) or _is_word(after):
        return 0
    return lead


def _map_lines(text: str, offset: int, source: str, fn: Callable[[str], str]) -> str:
    # ``text`` is ``source[offset:offset + len(text)]``. Only whole lines
    # can be list lines; quotes never share a line with one.
    out: list[str] = []
    pos = offset
    for piece in text.split("\n"):
        whole = (pos == 0 or source[pos - 1] == "\n") and (
            pos + len(piece) == len(source) or source[pos + len(piece)] == "\n"
        )
        out.append(piece if whole and is_list_line(piece) else fn(piece))
        pos += len(piece) + 1
    return "\n".join(out)


def map_quoted(
    text: str,
    narration: Callable[[str], str],
    quote: Callable[[str], str],
) -> str:
    """Apply ``narration`` to each prose line fragment outside quotes and
    ``quote`` to each quoted span.

    Star runs wrapping a quote are passed through untouched, as are list
    lines.
    """
    out: list[str] = []
    last = 0
    for start, end, closed in quote_spans(text):
        wrap = quote_wrap(text, start, end) if closed else 0
        if start - wrap < last:
            wrap = 0
        out.append(_map_lines(text[last : start - wrap], last, text, narration))
        out.append(text[start - wrap : start])
        out.append(quote(text[start:end]))
        out.append(text[end : end + wrap])
        last = end + wrap
    out.append(_map_lines(text[last:], last, text, narration))
    return "".join(out)
