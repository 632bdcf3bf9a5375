"""
Format Router — HTTP endpoints for the text repair pipeline.

Endpoints:
  POST /format                 — Format a block of text
  POST /format/command         — Command-style surface (/format <text>)
  GET  /format/samples         — List built-in sample cases
  POST /format/samples/{name}  — Run one sample case
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from format_fixer.config import settings
from format_fixer.models.format import (
    FormatCommandRequest,
    FormatCommandResponse,
    FormatOptions,
    FormatRequest,
    FormatResponse,
    SampleCase,
    SampleResult,
)
from format_fixer.services.formatting.pipeline import format_text, run_format_command
from format_fixer.services.formatting.samples import SAMPLE_CASES, get_sample, run_sample
from format_fixer.services.rate_limiter import get_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_client_ip(request: Request) -> str:
    """Extract client IP, respecting X-Forwarded-For behind proxies."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def _format_rate_limit(request: Request) -> None:
    """Rate limit format requests per client IP."""
    limiter = get_rate_limiter()
    if not limiter.check(_get_client_ip(request), settings.format_rate_limit_rpm):
        raise HTTPException(status_code=429, detail="Rate limit exceeded")


def _check_size(text: str) -> None:
    if len(text) > settings.max_input_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text exceeds {settings.max_input_chars} characters",
        )


def _options(options: FormatOptions | None) -> FormatOptions:
    return options if options is not None else settings.format_options()


# =============================================================================
# FORMAT
# =============================================================================


@router.post("")
async def format_endpoint(
    body: FormatRequest,
    _rate: None = Depends(_format_rate_limit),
) -> FormatResponse:
    """Repair emphasis and quote markup in the submitted text."""
    _check_size(body.text)
    result = format_text(body.text, _options(body.options))
    return FormatResponse(text=result, changed=result != body.text)


@router.post("/command")
async def format_command(
    body: FormatCommandRequest,
    _rate: None = Depends(_format_rate_limit),
) -> FormatCommandResponse:
    """Slash-command surface: formatted text, or an advisory for empty input."""
    _check_size(body.args)
    return FormatCommandResponse(output=run_format_command(body.args, _options(body.options)))


# =============================================================================
# SAMPLES
# =============================================================================


@router.get("/samples")
async def list_samples() -> list[SampleCase]:
    """Built-in before/after examples."""
    return list(SAMPLE_CASES.values())


@router.post("/samples/{name}")
async def run_sample_endpoint(
    name: str,
    _rate: None = Depends(_format_rate_limit),
) -> SampleResult:
    """Run one sample case through the pipeline."""
    case = get_sample(name)
    if case is None:
        raise HTTPException(status_code=404, detail=f"Unknown sample: {name}")

    result = run_sample(case)
    if not result.passed:
        logger.warning("Sample %s did not match its expected output", name)
    return result
