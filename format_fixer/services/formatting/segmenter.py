"""
Segmenter — one left-to-right pass that types every run of the text.

Quotes, narration, protected placeholders and code, list lines and
paragraph breaks. Stars are never boundaries here: they stay inside the
narration run they belong to and later passes decide what they mean.
"""

from __future__ import annotations

import re

from format_fixer.models.format import Segment, SegmentKind
from format_fixer.services.formatting.markers import (
    LIST_LINE_RE,
    STAR_RUN_RE,
    quote_spans,
    quote_wrap,
)
from format_fixer.services.formatting.protector import PLACEHOLDER_RE, TOKEN_OPEN

_NEWLINES_RE = re.compile(r"\n(?:[ \t]*\n)*")


def _line_bounds(text: str, pos: int) -> tuple[int, int]:
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    return start, len(text) if end == -1 else end


class EmphasisTracker:
    """Open-italic state along one forward scan.

    Queries must come at increasing positions; every star run is looked at
    once.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        # Bold runs never open or close an italic span.
        self.runs = [m.span() for m in STAR_RUN_RE.finditer(text) if len(m.group(0)) % 2]
        self.index = 0
        self.opener: int | None = None
        self.line_start = -1

    def within(self, pos: int, line_start: int, line_end: int) -> bool:
        text, runs = self.text, self.runs
        if line_start != self.line_start:
            self.line_start = line_start
            self.opener = None

        while self.index < len(runs) and runs[self.index][0] < pos:
            start, end = runs[self.index]
            self.index += 1
            if start < line_start:
                continue
            before = text[start - 1] if start > line_start else " "
            after = text[end] if end < len(text) else " "
            if self.opener is not None and not before.isspace():
                self.opener = None
            elif not after.isspace():
                self.opener = start

        if self.opener is None:
            return False
        if self.index < len(runs) and runs[self.index][0] < line_end:
            return not text[runs[self.index][0] - 1].isspace()
        return False


def is_within_emphasis(text: str, pos: int) -> bool:
    """True when the quote at ``pos`` sits inside an open ``*...*`` run.

    Looks back to the start of the line for an unmatched italic opener
    (bold runs skipped, a star followed by whitespace can't open), then
    forward for the first italic marker. That marker closes only if it
    follows content; a marker after whitespace is an opener, and nothing
    beyond it can close the earlier run either.
    """
    return EmphasisTracker(text).within(pos, *_line_bounds(text, pos))


class Segmenter:
    """Cursor-based scanner producing a list of ``Segment``."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.buffer_start = 0
        self.segments: list[Segment] = []
        self.quotes = {start: (end, closed) for start, end, closed in quote_spans(text)}
        self.emphasis = EmphasisTracker(text)
        self._line = (0, -1)

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def _emit(self, kind: SegmentKind, raw: str) -> None:
        self.segments.append(Segment(kind=kind, raw=raw, text=raw.strip()))

    def _flush(self, end: int) -> None:
        raw = self.text[self.buffer_start : end]
        if raw.strip():
            self._emit("narration", raw)
        self.buffer_start = end

    def _emit_span(self, kind: SegmentKind, start: int, end: int) -> None:
        self._flush(start)
        self._emit(kind, self.text[start:end])
        self.pos = self.buffer_start = end

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _line_bounds(self) -> tuple[int, int]:
        # Computed once per line; the cursor only moves forward.
        start, end = self._line
        if not start <= self.pos <= end:
            self._line = _line_bounds(self.text, self.pos)
        return self._line

    def _at_line_start(self) -> bool:
        return self.pos == 0 or self.text[self.pos - 1] == "\n"

    def _take_placeholder(self) -> bool:
        match = PLACEHOLDER_RE.match(self.text, self.pos)
        if match is None:
            return False
        self._emit_span("opaque", match.start(), match.end())
        return True

    def _take_code(self) -> bool:
        text, pos = self.text, self.pos
        if text.startswith("```", pos):
            close = text.find("```", pos + 3)
            self._emit_span("opaque", pos, len(text) if close == -1 else close + 3)
            return True
        _, line_end = self._line_bounds()
        close = text.find("`", pos + 1, line_end)
        if close == -1:
            return False
        self._emit_span("opaque", pos, close + 1)
        return True

    def _take_list_line(self) -> bool:
        if not self._at_line_start() or LIST_LINE_RE.match(self.text, self.pos) is None:
            return False
        _, line_end = self._line_bounds()
        self._emit_span("list_marker", self.pos, line_end)
        return True

    def _take_quote(self) -> None:
        text, pos = self.text, self.pos
        span = self.quotes.get(pos)
        if span is None:
            # A '"' left over inside a code span.
            self.pos += 1
            return
        end, closed = span

        wrap = quote_wrap(text, pos, end) if closed else 0
        if pos - wrap < self.buffer_start:
            wrap = 0
        if not wrap and self.emphasis.within(pos, *self._line_bounds()):
            # Part of the narration around it.
            self.pos = end
            return

        start = pos - wrap
        if start > self.buffer_start and text[start - 1] in " \t":
            start -= 1
        self._flush(start)

        if closed:
            stop = end + wrap
            if stop < len(text) and text[stop] in " \t":
                stop += 1
            self._emit("quote", text[start:stop])
        else:
            body = text[pos:end].rstrip()
            stop = pos + len(body)
            # A lone '"' with nothing after it is dropped, not paired.
            if len(body) > 1:
                self._emit("quote", text[start:stop] + '"')
        self.pos = self.buffer_start = stop

    def _take_newlines(self) -> None:
        match = _NEWLINES_RE.match(self.text, self.pos)
        self._flush(self.pos)
        count = match.group(0).count("\n")
        self._emit("paragraph_break", "\n" if count == 1 else "\n\n")
        self.pos = self.buffer_start = match.end()

    # -------------------------------------------------------------------------
    # Scan
    # -------------------------------------------------------------------------

    def run(self) -> list[Segment]:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == TOKEN_OPEN and self._take_placeholder():
                continue
            if ch == "`" and self._take_code():
                continue
            if self._take_list_line():
                continue
            if ch == '"':
                self._take_quote()
                continue
            if ch == "\n":
                self._take_newlines()
                continue
            self.pos += 1
        self._flush(len(text))
        return self.segments


def segment(text: str) -> list[Segment]:
    """Split ``text`` into typed segments. Empty narration is dropped."""
    return Segmenter(text).run()
