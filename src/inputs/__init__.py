"""
Tracker input layer.

Turns raw tracker submissions into canonical, validated payloads for the
enrichment pipeline.

Key Components:
- normalize / extract: querystring to non-empty name-value pairs
- ExtractionSuccess / ExtractionFailure: extraction outcomes
- CollectorLoader: base class for collector-specific loaders
"""

from .querystring import extract, extract_nv_get_payload, normalize
from .results import (
    ExtractionError,
    ExtractionErrorKind,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
)

__all__ = [
    # Querystring
    "normalize",
    "extract",
    "extract_nv_get_payload",
    # Results
    "ExtractionError",
    "ExtractionErrorKind",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
]
