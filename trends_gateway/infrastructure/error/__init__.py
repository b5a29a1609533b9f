"""
Error handling package for the Trends Gateway.
Provides upstream error categorization and fallback payload synthesis.
"""

from trends_gateway.infrastructure.error.handler import (
    ErrorCategory,
    ErrorDetails,
    ErrorHandler,
    ErrorSeverity,
    HTML_ERROR_PAGE_MESSAGE,
    categorize_error,
    classify,
    is_rate_limit_category,
    is_transient_category,
)

from trends_gateway.infrastructure.error.fallback import (
    FallbackPolicy,
    fallback_dates,
    synthesize_timeline,
)

__all__ = [
    # Error handler exports
    "ErrorCategory",
    "ErrorDetails",
    "ErrorHandler",
    "ErrorSeverity",
    "HTML_ERROR_PAGE_MESSAGE",
    "categorize_error",
    "classify",
    "is_rate_limit_category",
    "is_transient_category",

    # Fallback exports
    "FallbackPolicy",
    "fallback_dates",
    "synthesize_timeline",
]
