"""
Tests for the Uncensorer.

Covers: masked words, suffixes, casing, clean words left alone.
"""

from __future__ import annotations

import pytest

from format_fixer.services.formatting.uncensor import uncensor

# ===========================================================================
# TestUncensor
# ===========================================================================


@pytest.mark.unit
class TestUncensor:
    """Masked profanity back to the plain word."""

    @pytest.mark.parametrize(
        ("masked", "plain"),
        [
            ("f*ck", "fuck"),
            ("f**king", "fucking"),
            ("sh!t", "shit"),
            ("a$$hole", "asshole"),
            ("b*tch", "bitch"),
            ("d*mn", "damn"),
            ("h#ll", "hell"),
            ("motherf*cker", "motherfucker"),
        ],
    )
    def test_masked_words(self, masked: str, plain: str) -> None:
        assert uncensor(masked) == plain

    def test_in_sentence(self) -> None:
        assert uncensor("What the f*ck is this sh*t?") == "What the fuck is this shit?"

    def test_all_caps_kept(self) -> None:
        assert uncensor("F*CK") == "FUCK"

    def test_initial_cap_kept(self) -> None:
        assert uncensor("Sh*t happens.") == "Shit happens."

    @pytest.mark.parametrize("clean", ["fuck", "shift", "hello", "dock", "*hell*", "*damn*"])
    def test_clean_words_untouched(self, clean: str) -> None:
        assert uncensor(clean) == clean
