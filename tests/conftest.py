"""
Test configuration — shared fixtures.
"""

import pytest

from format_fixer.services.rate_limiter import reset_rate_limiter


@pytest.fixture(autouse=True)
def _fresh_rate_limiter():
    """Every test starts with empty rate limit windows."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()
