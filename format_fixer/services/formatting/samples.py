"""
Built-in sample cases shown to users as before/after examples.
"""

from __future__ import annotations

from format_fixer.models.format import FormatOptions, SampleCase, SampleResult
from format_fixer.services.formatting.pipeline import format_text

_STRIP = FormatOptions(strip_quote_emphasis=True)

SAMPLE_CASES: dict[str, SampleCase] = {
    case.name: case
    for case in (
        SampleCase(
            name="basic",
            title="Basic Quote and Narrative",
            input='*"Hello,"* she said *"I\'m happy to meet you."*',
            expected='"Hello," *she said* "I\'m happy to meet you."',
            options=_STRIP,
        ),
        SampleCase(
            name="nested",
            title="Nested Emphasis",
            input='*The cat was *very* cute* "He was *quite* happy"',
            expected='*The cat was **very** cute* "He was *quite* happy"',
            options=_STRIP,
        ),
        SampleCase(
            name="complex",
            title="Complex Mixed Formatting",
            input=(
                '*"Where did they go?"* The cat wondered, watching the *mysterious* '
                "figure disappear into the *dark and *spooky* night.*"
            ),
            expected=(
                '"Where did they go?" *The cat wondered, watching the **mysterious** '
                "figure disappear into the dark and **spooky** night.*"
            ),
            options=_STRIP,
        ),
    )
}


def get_sample(name: str) -> SampleCase | None:
    return SAMPLE_CASES.get(name)


def run_sample(case: SampleCase) -> SampleResult:
    """Format a sample's input and compare it with the expected output."""
    result = format_text(case.input, case.options)
    return SampleResult(
        name=case.name,
        result=result,
        expected=case.expected,
        passed=result == case.expected,
    )
