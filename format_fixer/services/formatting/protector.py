"""
Block Protector — swap untouchable spans for inert placeholder tokens.

Reasoning blocks, code, speaker labels and bracketed asides are lifted out
before any emphasis pass runs and put back verbatim at the very end.
Tokens are a decimal counter between two private-use code points, so they
hold no quote, star, backtick, bracket or newline and never read as a word.
Input that already carries those code points has them stashed first.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

logger = logging.getLogger(__name__)

TOKEN_OPEN = "\ue000"
TOKEN_CLOSE = "\ue001"
PLACEHOLDER_RE = re.compile(f"{TOKEN_OPEN}\\d+{TOKEN_CLOSE}")

# Text already shaped like a token, then any stray reserved code point.
_RESERVED_RE = re.compile(f"{TOKEN_OPEN}\\d*{TOKEN_CLOSE}|[{TOKEN_OPEN}{TOKEN_CLOSE}]")
_OPAQUE_CLOSED_RE = re.compile(
    r"<(think(?:ing)?)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_OPAQUE_UNCLOSED_RE = re.compile(r"<think(?:ing)?\b[^>]*>.*\Z", re.IGNORECASE | re.DOTALL)
_FENCE_RE = re.compile(r"```.*?(?:```|\Z)", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`\n]+`")
_MESSAGE_LABEL_RE = re.compile(r"^[^\n]*?\bMessage #\d+:(?=[ \t]|$)", re.MULTILINE)
_BRACKET_RE = re.compile(r"\[[^\[\]]*\]")
_BRACKET_UNCLOSED_RE = re.compile(r"\[[^\]]*\Z")


class ProtectionContext:
    """Placeholder bookkeeping for a single pipeline call."""

    def __init__(self) -> None:
        self._counter = 0
        # token -> original text, in insertion order
        self.blocks: dict[str, str] = {}
        self.literals: set[str] = set()

    def stash(self, original: str, literal: bool = False) -> str:
        """Record ``original`` and return the token that stands in for it.

        A literal block is restored as is, never searched for tokens.
        """
        token = f"{TOKEN_OPEN}{self._counter}{TOKEN_CLOSE}"
        self._counter += 1
        self.blocks[token] = original
        if literal:
            self.literals.add(token)
        return token

    def __len__(self) -> int:
        return len(self.blocks)


def _stash_all(pattern: re.Pattern[str], text: str, ctx: ProtectionContext) -> str:
    return pattern.sub(lambda m: ctx.stash(m.group(0)), text)


def split_placeholders(text: str, fn: Callable[[str], str]) -> str:
    """Apply ``fn`` to the runs of ``text`` between placeholder tokens."""
    out: list[str] = []
    last = 0
    for match in PLACEHOLDER_RE.finditer(text):
        out.append(fn(text[last : match.start()]))
        out.append(match.group(0))
        last = match.end()
    out.append(fn(text[last:]))
    return "".join(out)


def extract(text: str) -> tuple[str, ProtectionContext]:
    """Replace protected spans with placeholders.

    Each step sees the previous step's output, so an aside that wraps a
    reasoning block captures that block's token, not its text.
    """
    ctx = ProtectionContext()

    text = _RESERVED_RE.sub(lambda m: ctx.stash(m.group(0), literal=True), text)
    text = _stash_all(_OPAQUE_CLOSED_RE, text, ctx)
    text = _stash_all(_OPAQUE_UNCLOSED_RE, text, ctx)
    text = _stash_all(_FENCE_RE, text, ctx)
    text = _stash_all(_INLINE_CODE_RE, text, ctx)
    text = _stash_all(_MESSAGE_LABEL_RE, text, ctx)

    # Innermost brackets first; repeat so an outer aside swallows inner tokens.
    while True:
        stashed = _stash_all(_BRACKET_RE, text, ctx)
        if stashed == text:
            break
        text = stashed
    text = _stash_all(_BRACKET_UNCLOSED_RE, text, ctx)

    if ctx.blocks:
        logger.debug("Protected %d block(s)", len(ctx))
    return text, ctx


def restore(text: str, ctx: ProtectionContext) -> str:
    """Put every protected span back.

    One pass over the text. A stashed span is expanded in turn, since it
    may hold tokens stashed before it; literal blocks are not.
    """

    def _expand(match: re.Match[str]) -> str:
        token = match.group(0)
        original = ctx.blocks.get(token)
        if original is None:
            return token
        if token in ctx.literals:
            return original
        return PLACEHOLDER_RE.sub(_expand, original)

    return PLACEHOLDER_RE.sub(_expand, text)


def apply_outside(text: str, fn: Callable[[str], str]) -> str:
    """Run ``fn`` over ``text`` with every protected span held out."""
    text, ctx = extract(text)
    return restore(split_placeholders(text, fn), ctx)
