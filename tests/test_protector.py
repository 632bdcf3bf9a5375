"""
Tests for the Block Protector.

Covers: think blocks, code, message labels, bracketed asides, restore order,
input carrying the token code points, running a pass outside protected spans.
"""

from __future__ import annotations

import pytest

from format_fixer.services.formatting.protector import (
    PLACEHOLDER_RE,
    ProtectionContext,
    apply_outside,
    extract,
    restore,
)
from format_fixer.services.formatting.uncensor import uncensor

# ===========================================================================
# TestExtract
# ===========================================================================


@pytest.mark.unit
class TestExtract:
    """Protected spans are swapped for placeholder tokens."""

    def test_closed_think_block(self) -> None:
        text, ctx = extract("Hi <think>*plan* \"x\"</think> there")
        assert "think" not in text
        assert "*" not in text
        assert len(ctx) == 1

    def test_thinking_tag_case_insensitive(self) -> None:
        text, ctx = extract("<THINKING>\nstep *one*\n</Thinking>\nDone.")
        assert text.endswith("\nDone.")
        assert len(ctx) == 1

    def test_unclosed_think_runs_to_end(self) -> None:
        text, ctx = extract("Start <think>never *closed*\nstill thinking")
        assert text.startswith("Start ")
        assert PLACEHOLDER_RE.fullmatch(text[len("Start ") :])

    def test_inline_code(self) -> None:
        text, _ = extract("Use `*args*` here")
        assert "`" not in text
        assert "*" not in text

    def test_fenced_code(self) -> None:
        text, ctx = extract("Before\n```\n*x* = \"y\"\n```\nAfter")
        assert text.startswith("Before\n")
        assert text.endswith("\nAfter")
        assert len(ctx) == 1

    def test_message_label(self) -> None:
        text, ctx = extract("Narrator Message #12: *She waits.*")
        assert text.endswith(" *She waits.*")
        assert list(ctx.blocks.values()) == ["Narrator Message #12:"]

    def test_bracketed_aside(self) -> None:
        text, ctx = extract('[OOC: *don\'t* change "this"] She left.')
        assert text.endswith(" She left.")
        assert "[" not in text

    def test_nested_brackets_single_outer_token(self) -> None:
        text, _ = extract("x [a [b] c] y")
        assert PLACEHOLDER_RE.fullmatch(text[2:-2])

    def test_unclosed_bracket(self) -> None:
        text, _ = extract("She said [note to self")
        assert "[" not in text

    def test_nothing_to_protect(self) -> None:
        text, ctx = extract("*Just prose.*")
        assert text == "*Just prose.*"
        assert len(ctx) == 0


# ===========================================================================
# TestRestore
# ===========================================================================


@pytest.mark.unit
class TestRestore:
    """Tokens go back verbatim."""

    @pytest.mark.parametrize(
        "original",
        [
            "Hi <think>*plan*</think> there",
            "x [a [b] c] y",
            "Use `code` and [aside <think>t</think>] ok",
            "User Message #3: hello [OOC]",
            "He said \ue0000\ue001 then [aside]",
            "stray \ue001 and \ue000 [x]",
        ],
    )
    def test_extract_then_restore_is_identity(self, original: str) -> None:
        text, ctx = extract(original)
        assert restore(text, ctx) == original

    def test_missing_token_is_fine(self) -> None:
        ctx = ProtectionContext()
        ctx.stash("[gone]")
        assert restore("no tokens here", ctx) == "no tokens here"

    def test_tokens_are_inert(self) -> None:
        ctx = ProtectionContext()
        token = ctx.stash("anything")
        assert not any(ch in token for ch in '*"`[]\n')
        assert not token[0].isalnum() and not token[-1].isalnum()

    def test_token_lookalike_is_literal(self) -> None:
        original = "He said \ue0000\ue001 then [aside]"
        text, ctx = extract(original)
        assert list(ctx.blocks.values()) == ["\ue0000\ue001", "[aside]"]
        assert restore(text, ctx) == original

    def test_literal_block_not_expanded(self) -> None:
        ctx = ProtectionContext()
        first = ctx.stash("\ue0001\ue001", literal=True)
        ctx.stash("[aside]")
        assert restore(f"a {first} b", ctx) == "a \ue0001\ue001 b"


# ===========================================================================
# TestApplyOutside
# ===========================================================================


@pytest.mark.unit
class TestApplyOutside:
    """A pass that must not reach protected spans."""

    def test_think_block_left_alone(self) -> None:
        text = "<think>f*ck this</think> what the f*ck"
        assert apply_outside(text, uncensor) == "<think>f*ck this</think> what the fuck"

    def test_aside_left_alone(self) -> None:
        assert apply_outside("a [b] c", str.upper) == "A [b] C"
