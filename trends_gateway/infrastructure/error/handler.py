"""
Error handling module for the Trends Gateway.
Provides centralized upstream error categorization and logging.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel

from trends_gateway.core.exceptions import ClassifiedUpstreamError
from trends_gateway.domain.models.outcome import FailureKind


HTML_ERROR_PAGE_MESSAGE = "upstream returned an HTML error page"


class ErrorCategory(str, Enum):
    """Categorization of upstream errors for retry and degradation decisions."""
    RATE_LIMIT = "rate_limit"
    BLOCKED = "blocked"
    CAPTCHA = "captcha"
    HTML_ERROR_PAGE = "html_error_page"
    UPSTREAM = "upstream"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    MEDIUM = "medium"
    HIGH = "high"


# Checked in order; the first category with a matching marker wins.
MESSAGE_MARKERS: Tuple[Tuple[ErrorCategory, Tuple[str, ...]], ...] = (
    (ErrorCategory.HTML_ERROR_PAGE, ("html error page", "unexpected token <", "<!doctype", "<html")),
    (ErrorCategory.CAPTCHA, ("captcha",)),
    (ErrorCategory.RATE_LIMIT, ("429", "too many requests", "rate limit", "rate-limit", "ratelimit", "quota")),
    (ErrorCategory.BLOCKED, ("blocked", "forbidden", "unusual traffic")),
)

TRANSIENT_CATEGORIES = frozenset({
    ErrorCategory.RATE_LIMIT,
    ErrorCategory.BLOCKED,
    ErrorCategory.CAPTCHA,
    ErrorCategory.HTML_ERROR_PAGE,
})

RATE_LIMIT_CATEGORIES = frozenset({
    ErrorCategory.RATE_LIMIT,
    ErrorCategory.BLOCKED,
    ErrorCategory.CAPTCHA,
})


def categorize_error(error: BaseException) -> ErrorCategory:
    """
    Categorize an upstream error by inspecting its message.

    Errors that were already classified keep their category.

    Args:
        error: The exception raised while fetching from the upstream

    Returns:
        ErrorCategory: The matching category, ``UPSTREAM`` when nothing matches
    """
    if isinstance(error, ClassifiedUpstreamError) and isinstance(error.category, ErrorCategory):
        return error.category

    message = str(error).lower()
    for category, markers in MESSAGE_MARKERS:
        if any(marker in message for marker in markers):
            return category
    return ErrorCategory.UPSTREAM


def is_transient_category(category: Optional[ErrorCategory]) -> bool:
    return category in TRANSIENT_CATEGORIES


def is_rate_limit_category(category: Optional[ErrorCategory]) -> bool:
    """Rate limiting, blocking and CAPTCHA challenges all mean "back off"."""
    return category in RATE_LIMIT_CATEGORIES


def classify(error: BaseException) -> FailureKind:
    """
    Decide whether an upstream error is transient (retry) or fatal (give up).

    Args:
        error: The exception raised while fetching from the upstream

    Returns:
        FailureKind: ``TRANSIENT`` for rate limit, block, CAPTCHA and HTML
        error pages, ``FATAL`` for everything else
    """
    if is_transient_category(categorize_error(error)):
        return FailureKind.TRANSIENT
    return FailureKind.FATAL


class ErrorDetails(BaseModel):
    """Structured error details for consistency in logging."""
    timestamp: datetime
    category: ErrorCategory
    kind: FailureKind
    severity: ErrorSeverity
    message: str
    source: str
    context: Dict[str, Any] = {}
    retry_count: int = 0
    max_retries: int = 0


class ErrorHandler:
    """
    Central error processing class that handles error categorization,
    logging and retry decisions for upstream calls.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize the error handler.

        Args:
            logger: Logger instance for error logging
        """
        self.logger = logger

    def handle_error(
        self,
        exception: BaseException,
        source: str,
        context: Optional[Dict[str, Any]] = None,
        retry_count: int = 0,
        max_retries: int = 0,
    ) -> ErrorDetails:
        """
        Process an error: categorize it and log it.

        Args:
            exception: The exception that occurred
            source: Source identifier (e.g., "upstream")
            context: Additional context about the error
            retry_count: Current attempt number
            max_retries: Maximum number of attempts allowed

        Returns:
            ErrorDetails: Structured details about the error
        """
        category = categorize_error(exception)
        kind = FailureKind.TRANSIENT if is_transient_category(category) else FailureKind.FATAL

        error_details = ErrorDetails(
            timestamp=datetime.now(timezone.utc),
            category=category,
            kind=kind,
            severity=ErrorSeverity.MEDIUM if kind == FailureKind.TRANSIENT else ErrorSeverity.HIGH,
            message=str(exception),
            source=source,
            context=context or {},
            retry_count=retry_count,
            max_retries=max_retries,
        )

        self.log_error(error_details)
        return error_details

    def log_error(self, error_details: ErrorDetails) -> None:
        """
        Log error details at the appropriate level.

        Args:
            error_details: Structured error information
        """
        log_data = {
            "category": error_details.category.value,
            "kind": error_details.kind.value,
            "source": error_details.source,
            "retry_count": error_details.retry_count,
            "max_retries": error_details.max_retries,
        }
        if error_details.context:
            log_data["context"] = error_details.context

        if error_details.severity == ErrorSeverity.HIGH:
            self.logger.error(f"Upstream error: {error_details.message}", extra={"data": log_data})
        else:
            self.logger.warning(f"Upstream error: {error_details.message}", extra={"data": log_data})
