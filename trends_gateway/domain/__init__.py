"""
Domain package for the Trends Gateway.

Contains the query, upstream outcome and response envelope models.
"""

from .models import (
    CanonicalQuery,
    FailureKind,
    RawQuery,
    SearchMeta,
    UpstreamFailure,
    UpstreamOutcome,
    UpstreamSuccess,
)

__all__ = [
    "CanonicalQuery",
    "FailureKind",
    "RawQuery",
    "SearchMeta",
    "UpstreamFailure",
    "UpstreamOutcome",
    "UpstreamSuccess",
]
