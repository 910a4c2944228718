"""
Shared pytest fixtures for the tracker input test suite.

Provides reusable fixtures for creating CanonicalInput test objects.
"""

from datetime import datetime, timezone

import pytest

from src.schemas.canonical_input import (
    CanonicalInput,
    InputSource,
    NameValueNel,
    NVGetPayload,
)


@pytest.fixture
def input_source():
    """Return a default collector source."""
    return InputSource(collector="cloudfront", hostname="collector-1.test")


@pytest.fixture
def nv_payload():
    """Return a small page view payload."""
    return NVGetPayload(payload=NameValueNel(("e", "pv"), ("page", "home")))


@pytest.fixture
def create_canonical_input(input_source, nv_payload):
    """
    Return a function that creates CanonicalInput objects with sensible defaults.

    All defaults can be overridden via keyword arguments.

    Example:
        record = create_canonical_input(user_id="u-123")
    """

    def _create_canonical_input(**kwargs) -> CanonicalInput:
        defaults = {
            "timestamp": datetime(2013, 8, 17, 12, 0, tzinfo=timezone.utc),
            "payload": nv_payload,
            "source": input_source,
            "encoding": "UTF-8",
        }

        # Merge defaults with provided kwargs
        defaults.update(kwargs)

        return CanonicalInput(**defaults)

    return _create_canonical_input
