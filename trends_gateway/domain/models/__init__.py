from .query import CanonicalQuery, KeywordInput, RawQuery
from .outcome import FailureKind, UpstreamFailure, UpstreamOutcome, UpstreamSuccess
from .envelope import SearchMeta, build_envelope

__all__ = [
    "CanonicalQuery",
    "KeywordInput",
    "RawQuery",
    "FailureKind",
    "UpstreamFailure",
    "UpstreamOutcome",
    "UpstreamSuccess",
    "SearchMeta",
    "build_envelope",
]
