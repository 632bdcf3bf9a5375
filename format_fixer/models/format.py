"""
Format Models — Pydantic request/response models for Format Fixer.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# OPTIONS
# =============================================================================


class FormatOptions(BaseModel):
    """Per-call pipeline switches."""

    strip_quote_emphasis: bool = False
    uncensor: bool = True
    # Quote-internal nesting stays italic unless a host opts in.
    promote_quote_emphasis: bool = False


# =============================================================================
# REQUEST MODELS
# =============================================================================


class FormatRequest(BaseModel):
    """Text submitted from a host text box."""

    text: str
    options: FormatOptions | None = None


class FormatCommandRequest(BaseModel):
    """Free text passed to the /format command."""

    args: str = ""
    options: FormatOptions | None = None


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class FormatResponse(BaseModel):
    """Formatted text."""

    text: str
    changed: bool


class FormatCommandResponse(BaseModel):
    """Command output: formatted text or an advisory message."""

    output: str


class SampleCase(BaseModel):
    """Built-in before/after example."""

    name: str
    title: str
    input: str
    expected: str
    options: FormatOptions = Field(default_factory=FormatOptions)


class SampleResult(BaseModel):
    """Outcome of running a sample case."""

    name: str
    result: str
    expected: str
    passed: bool


# =============================================================================
# INTERNAL MODELS
# =============================================================================

SegmentKind = Literal["quote", "narration", "opaque", "list_marker", "paragraph_break"]


class Segment(BaseModel):
    """Typed slice of the text produced by the segmenter.

    ``raw`` is the exact source slice (surrounding whitespace included) and
    ``text`` is the same slice trimmed.
    """

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    raw: str
    text: str
