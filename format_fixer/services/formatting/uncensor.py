"""
Uncensorer — restore words that a model masked with filler characters.

"f*ck", "sh!t", "a$$hole" and friends. Runs before protection and
normalization: the masking stars would otherwise be read as emphasis.
"""

from __future__ import annotations

import re
from typing import Callable

_FILLER = r"*#@$%!_\-"


def _masked(head: str, middle: str, tail: str, suffix: str = "") -> re.Pattern[str]:
    """Pattern for ``head + middle + tail`` with the middle partly masked.

    The masked slot must contain at least one filler character, so the
    clean spelling never matches.
    """
    slot = rf"[{middle}{_FILLER}]{{1,{len(middle) + 2}}}"
    guard = rf"(?=[{middle}]*[{_FILLER}])"
    return re.compile(
        rf"(?<!\w){head}{guard}{slot}{tail}(?P<suffix>{suffix})\b",
        re.IGNORECASE,
    )


def _with_suffix(word: str) -> Callable[[re.Match[str]], str]:
    def build(match: re.Match[str]) -> str:
        return word + (match.group("suffix") or "").lower()

    return build


# Most specific first: "motherf*cker" must win over "f*ck".
_RULES: tuple[tuple[re.Pattern[str], str | Callable[[re.Match[str]], str]], ...] = (
    (_masked("motherf", "uc", "k", r"ers|er|ing|in"), _with_suffix("motherfuck")),
    (_masked("f", "uc", "k", r"ing|in|ed|ers|er|s|"), _with_suffix("fuck")),
    (_masked("sh", "i", "t", r"ty|s|"), _with_suffix("shit")),
    (_masked("b", "it", "ch", r"es|y|"), _with_suffix("bitch")),
    (_masked("a", "ss", "hole", r"s|"), _with_suffix("asshole")),
    (_masked("b", "a", "stard", r"s|"), _with_suffix("bastard")),
    (_masked("d", "a", "mn", r"ed|it|"), _with_suffix("damn")),
    (_masked("c", "u", "nt", r"s|"), _with_suffix("cunt")),
    (_masked("d", "i", "ck", r"head|s|"), _with_suffix("dick")),
    (_masked("c", "o", "ck", r"s|"), _with_suffix("cock")),
    (_masked("p", "u", "ssy", r""), "pussy"),
    (_masked("wh", "o", "re", r"s|"), _with_suffix("whore")),
    (_masked("sl", "u", "t", r"ty|s|"), _with_suffix("slut")),
    (_masked("h", "e", "ll", r""), "hell"),
)


def _match_case(template: str, word: str) -> str:
    if template.isupper():
        return word.upper()
    if template[:1].isupper():
        return word.capitalize()
    return word.lower()


def uncensor(text: str) -> str:
    """Replace masked profanity with the plain word, keeping the casing class."""
    for pattern, replacement in _RULES:

        def _sub(match: re.Match[str], replacement=replacement) -> str:
            word = replacement(match) if callable(replacement) else replacement
            return _match_case(match.group(0), word)

        text = pattern.sub(_sub, text)
    return text
