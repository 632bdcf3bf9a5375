"""
Format Pipeline — the one entry point hosts call.

Pure function over a single string: no I/O, no shared state, every
per-call structure (placeholder context, scan buffers) built fresh.
Any failure inside a pass hands back the caller's text untouched.
"""

from __future__ import annotations

import logging

from format_fixer.models.format import FormatOptions
from format_fixer.services.formatting import protector
from format_fixer.services.formatting.characters import normalize_characters
from format_fixer.services.formatting.emphasis import (
    collapse_excess_markers,
    normalize_marker_spacing,
    normalize_quote_spacing,
    promote_single_words,
    remove_lone_asterisks_in_quotes,
    remove_unpaired_double_markers,
)
from format_fixer.services.formatting.italicizer import italicize
from format_fixer.services.formatting.nesting import (
    clean_whitespace,
    fix_line_start_emphasis,
    merge_nested_emphasis,
)
from format_fixer.services.formatting.quotes import (
    collapse_consecutive_quote_marks,
    strip_quote_wrapping_emphasis,
)
from format_fixer.services.formatting.segmenter import segment
from format_fixer.services.formatting.uncensor import uncensor

logger = logging.getLogger(__name__)

EMPTY_COMMAND_MESSAGE = "Please provide text to format"


def _run(text: str, options: FormatOptions) -> str:
    if options.uncensor:
        text = protector.apply_outside(text, uncensor)

    text, ctx = protector.extract(text)
    text = text.replace("\r\n", "\n")
    text = normalize_characters(text)

    if options.strip_quote_emphasis:
        text = strip_quote_wrapping_emphasis(text)
        text = collapse_consecutive_quote_marks(text)

    # Emphasis repair: promotion, then malformed markers, then spacing.
    text = promote_single_words(text, include_quotes=options.promote_quote_emphasis)
    text = collapse_excess_markers(text)
    text = remove_unpaired_double_markers(text)
    text = remove_lone_asterisks_in_quotes(text)
    text = normalize_marker_spacing(text)
    text = normalize_quote_spacing(text)

    # Structure: narration in italics, nesting resolved.
    text = italicize(segment(text))
    text = clean_whitespace(text)
    text = merge_nested_emphasis(text)
    text = fix_line_start_emphasis(text)

    return protector.restore(text, ctx)


def format_text(raw_text: str, options: FormatOptions | None = None) -> str:
    """Repair emphasis and quote markup in ``raw_text``.

    Never raises: on any internal error the input comes back unchanged.
    """
    if not raw_text or not raw_text.strip():
        return raw_text
    options = options or FormatOptions()

    try:
        result = _run(raw_text, options)
    except Exception:
        logger.exception("Format pipeline failed; returning input unchanged")
        return raw_text

    logger.debug("Formatted %d chars -> %d chars", len(raw_text), len(result))
    return result


def run_format_command(text: str | None, options: FormatOptions | None = None) -> str:
    """Command-style surface: formatted text, or an advisory for empty input."""
    if not text or not text.strip():
        return EMPTY_COMMAND_MESSAGE
    return format_text(text, options)
