"""
Tests for the Format Pipeline.

Covers: end-to-end scenario, idempotence, quote-wrap removal, narration
italicization, single-word promotion, block opacity, list lines, marker-run
collapse, options, fail-safe behaviour, command surface, sample cases,
dialogue over line breaks, star-wrapped dialogue, long single lines.
"""

from __future__ import annotations

import time
from unittest.mock import patch

import pytest

from format_fixer.models.format import FormatOptions
from format_fixer.services.formatting.pipeline import (
    EMPTY_COMMAND_MESSAGE,
    format_text,
    run_format_command,
)
from format_fixer.services.formatting.samples import SAMPLE_CASES, get_sample, run_sample

STRIP = FormatOptions(strip_quote_emphasis=True)


# ===========================================================================
# TestFormatText
# ===========================================================================


@pytest.mark.unit
class TestFormatText:
    """Whole-pipeline behaviour."""

    def test_end_to_end(self) -> None:
        text = '*"Where did they go?"* The cat wondered, watching the *mysterious* figure.'
        expected = (
            '"Where did they go?" *The cat wondered, watching the **mysterious** figure.*'
        )
        assert format_text(text, STRIP) == expected

    @pytest.mark.parametrize(
        "text",
        [
            '*"Where did they go?"* The cat wondered, watching the *mysterious* figure.',
            '*"Hello,"* she said *"I\'m happy to meet you."*',
            "She said \"Hi\" and left.\n\n1. Fight\n2. Run",
            "*The cat was *very* cute* \"He was *quite* happy\"",
            '"Hello there,\nmy friend," she said.',
            'hi *"q"* there *"r"*',
        ],
    )
    def test_idempotent(self, text: str) -> None:
        once = format_text(text, STRIP)
        assert format_text(once, STRIP) == once

    def test_quote_wrap_kept_without_option(self) -> None:
        assert format_text('*"Hello"*') == '*"Hello"*'

    def test_narration_italicized(self) -> None:
        assert format_text('"Hi" she said') == '"Hi" *she said*'

    def test_narration_between_quotes(self) -> None:
        text = '"Hello." She waved. "Bye."'
        assert format_text(text) == '"Hello." *She waved.* "Bye."'

    def test_single_word_promoted(self) -> None:
        assert format_text("She was *very* tired.") == "*She was **very** tired.*"

    def test_dialogue_only_unchanged(self) -> None:
        assert format_text('"Just dialogue here."') == '"Just dialogue here."'

    def test_bracketed_aside_opaque(self) -> None:
        text = 'She said [OOC: *don\'t* change "this"] and left.'
        assert format_text(text) == '*She said* [OOC: *don\'t* change "this"] *and left.*'

    def test_think_block_opaque(self) -> None:
        text = "<think>plan *x* \"y\"</think>\n\nHello there."
        assert format_text(text) == "<think>plan *x* \"y\"</think>\n\n*Hello there.*"

    def test_list_lines_exempt(self) -> None:
        text = "*She asks:*\n1. *Fight*\n2. Run"
        assert format_text(text) == text

    def test_no_long_marker_runs(self) -> None:
        result = format_text("He was *****shocked*****.")
        assert "****" not in result

    def test_smart_quotes_normalized(self) -> None:
        assert format_text("“Hi,” she said.") == '"Hi," *she said.*'

    def test_uncensor_on_by_default(self) -> None:
        assert format_text("What the f*ck") == "*What the fuck*"

    def test_uncensor_off(self) -> None:
        result = format_text("What the f*ck", FormatOptions(uncensor=False))
        assert "fuck" not in result

    def test_paragraphs_kept(self) -> None:
        text = "He waits.\n\n\n\n\"Hi.\""
        assert format_text(text) == '*He waits.*\n\n"Hi."'

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_blank_input_returned(self, text: str) -> None:
        assert format_text(text) == text


# ===========================================================================
# TestQuotesAndProtection
# ===========================================================================


@pytest.mark.unit
class TestQuotesAndProtection:
    """Dialogue over line breaks, star-wrapped dialogue, protected spans."""

    def test_multiline_dialogue_kept_whole(self) -> None:
        text = '"Hello there,\nmy friend," she said.'
        assert format_text(text) == '"Hello there,\nmy friend," *she said.*'

    def test_multiline_dialogue_alone_unchanged(self) -> None:
        assert format_text('"Line one\nline two"') == '"Line one\nline two"'

    def test_wrapped_quotes_kept_by_default(self) -> None:
        text = 'hi *"q"* there *"r"*'
        assert format_text(text) == '*hi* *"q"* *there* *"r"*'

    def test_wrapped_quote_mid_sentence(self) -> None:
        assert format_text('x *"quote"* y') == '*x* *"quote"* *y*'

    def test_unclosed_quote_not_promoted(self) -> None:
        assert format_text('"unclosed and more *x*') == '"unclosed and more *x*"'

    def test_token_code_points_in_input_survive(self) -> None:
        text = "He said \ue0000\ue001 then [aside]"
        assert format_text(text) == "*He said* \ue0000\ue001 *then* [aside]"

    def test_uncensor_skips_think_block(self) -> None:
        text = "<think>f*ck this</think> ok"
        assert format_text(text) == "<think>f*ck this</think> *ok*"

    def test_many_quotes_on_one_line_scale(self) -> None:
        count = 4000
        text = 'she said "a *b* c" and *x* ' * count
        started = time.monotonic()
        result = format_text(text)
        assert time.monotonic() - started < 10.0
        assert result.count('"a *b* c"') == count


# ===========================================================================
# TestFailSafe
# ===========================================================================


@pytest.mark.unit
class TestFailSafe:
    """A failing stage hands back the original input."""

    def test_stage_error_returns_input(self) -> None:
        text = '*"Hello"* she said'
        with patch(
            "format_fixer.services.formatting.pipeline.segment",
            side_effect=RuntimeError("boom"),
        ):
            assert format_text(text, STRIP) == text

    def test_stage_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch(
            "format_fixer.services.formatting.pipeline.uncensor",
            side_effect=ValueError("bad"),
        ):
            format_text("anything")
        assert "Format pipeline failed" in caplog.text


# ===========================================================================
# TestRunFormatCommand
# ===========================================================================


@pytest.mark.unit
class TestRunFormatCommand:
    """Command-style surface."""

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_gives_advisory(self, text: str | None) -> None:
        assert run_format_command(text) == EMPTY_COMMAND_MESSAGE

    def test_formats_text(self) -> None:
        assert run_format_command('"Hi" she said') == '"Hi" *she said*'


# ===========================================================================
# TestSamples
# ===========================================================================


@pytest.mark.unit
class TestSamples:
    """Built-in before/after cases."""

    @pytest.mark.parametrize("name", sorted(SAMPLE_CASES))
    def test_sample_passes(self, name: str) -> None:
        result = run_sample(SAMPLE_CASES[name])
        assert result.passed, result.result

    def test_get_unknown_sample(self) -> None:
        assert get_sample("missing") is None
