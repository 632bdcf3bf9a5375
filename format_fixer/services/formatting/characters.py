"""
Character Normalizer — smart typography to ASCII.

Structural passes match on ASCII ``"``, ``'`` and ``*``, so this runs
before any of them.
"""

from __future__ import annotations

_DOUBLE_QUOTES = (
    "“”"  # left/right double quotation mark
    "„‟"  # low-9 and reversed high-9
    "«»"  # guillemets
    "″‶"  # double prime, reversed double prime
    "❝❞"  # heavy ornaments
    "〝〞〟"  # CJK double prime quotes
    "＂"  # fullwidth quotation mark
)

_SINGLE_QUOTES = (
    "‘’"  # left/right single quotation mark
    "‚‛"  # low-9 and reversed high-9
    "‹›"  # single angle quotes
    "′‵"  # prime, reversed prime
    "❛❜"  # heavy ornaments
    "ʼ"  # modifier letter apostrophe
    "＇"  # fullwidth apostrophe
)

_HYPHENS = (
    "‐‑‒"  # hyphen, non-breaking hyphen, figure dash
    "–"  # en dash
    "⁃"  # hyphen bullet
    "−"  # minus sign
    "﹣－"  # small/fullwidth hyphen-minus
)

_SPACES = (
    "\u00a0"  # no-break space
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"  # en quad .. hair space
    "\u202f\u205f\u3000"  # narrow no-break, math, ideographic
)

_BULLETS = "•‣∙●◦⦁"

_TABLE: dict[int, str] = {}
_TABLE.update({ord(ch): '"' for ch in _DOUBLE_QUOTES})
_TABLE.update({ord(ch): "'" for ch in _SINGLE_QUOTES})
_TABLE.update({ord(ch): "-" for ch in _HYPHENS})
_TABLE.update({ord(ch): " " for ch in _SPACES})
_TABLE.update({ord(ch): "*" for ch in _BULLETS})
_TABLE[0x2015] = "—"  # horizontal bar -> em dash
_TABLE[0x2026] = "..."


def normalize_characters(text: str) -> str:
    """Map smart quotes, dashes, ellipses, special spaces and bullets to ASCII."""
    return text.translate(_TABLE)
