"""
Collector loaders.

Each collector writes its own log format; its loader converts raw lines
into CanonicalInput records.
"""

from .base_loader import CollectorLoader, LoadSummary

__all__ = [
    "CollectorLoader",
    "LoadSummary",
]
