from fastapi import status
from typing import Any, Dict, Optional


class APIException(Exception):
    """
    Base exception for API errors.

    All caller-facing exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class RateLimitError(APIException):
    """Raised when the upstream keeps rate limiting or blocking us and the caller should back off."""

    def __init__(
        self,
        detail: str = "Rate limit exceeded",
        code: str = "rate_limit_error",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {}
        if retry_after is not None:
            merged_context["retry_after"] = retry_after

        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            code=code,
            context=merged_context
        )
        self.retry_after = retry_after


class UpstreamFatalError(APIException):
    """Raised when the upstream failed in a way retrying will not fix."""

    def __init__(
        self,
        detail: str = "Upstream request failed",
        code: str = "upstream_error",
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[str] = None
    ):
        merged_context = dict(context or {})
        if original_error:
            merged_context["original_error"] = original_error

        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=merged_context
        )


class UpstreamRequestError(Exception):
    """Raised by upstream clients when a fetch does not produce a payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ClassifiedUpstreamError(Exception):
    """Base for upstream failures that already carry an error category."""

    def __init__(self, message: str, category: Any = None):
        super().__init__(message)
        self.category = category


class TransientUpstreamError(ClassifiedUpstreamError):
    """An upstream failure that is worth retrying."""


class FatalUpstreamError(ClassifiedUpstreamError):
    """An upstream failure that must not be retried."""
