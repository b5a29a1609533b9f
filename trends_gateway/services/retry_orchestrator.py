"""
Resilient upstream fetch.

Calls the upstream with a bounded number of attempts and a jittered,
non-blocking pause between attempts. Every failure is classified on the way
out, so callers only ever see an ``UpstreamSuccess`` or an ``UpstreamFailure``.
"""
import asyncio
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)

from trends_gateway.adapters.interfaces.upstream import UpstreamClient
from trends_gateway.core.exceptions import (
    FatalUpstreamError,
    TransientUpstreamError,
)
from trends_gateway.core.logging import get_logger
from trends_gateway.domain.models.outcome import (
    FailureKind,
    UpstreamFailure,
    UpstreamOutcome,
    UpstreamSuccess,
)
from trends_gateway.domain.models.query import CanonicalQuery
from trends_gateway.infrastructure.error.handler import (
    HTML_ERROR_PAGE_MESSAGE,
    ErrorCategory,
    ErrorHandler,
)

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_DELAY = 1.0
DEFAULT_MAX_DELAY = 3.0

Sleep = Callable[[float], Awaitable[None]]


def looks_like_html(payload: str) -> bool:
    """Blocked requests sometimes come back as a 200 with an HTML page."""
    return payload.lstrip().startswith("<")


class RetryOrchestrator:
    """
    Fetches from the upstream, retrying transient failures.

    Attempts run from 1 to ``max_attempts``. Before every attempt but the
    first the orchestrator suspends for a delay drawn uniformly from
    ``[min_delay, max_delay)`` seconds. Fatal failures and successes end the
    loop immediately.
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        min_delay: float = DEFAULT_MIN_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the orchestrator.

        Args:
            upstream: Client used for every attempt
            max_attempts: Total attempt budget, including the first call
            min_delay: Lower bound of the inter-attempt delay in seconds
            max_delay: Upper bound of the inter-attempt delay in seconds
            sleep: Coroutine used to suspend between attempts
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.upstream = upstream
        self.max_attempts = max_attempts
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.sleep = sleep
        self.error_handler = ErrorHandler(logger)

    async def _attempt(self, query: CanonicalQuery, attempt_number: int) -> str:
        logger.info(
            f"Upstream attempt {attempt_number}/{self.max_attempts}",
            extra={"data": {"attempt": attempt_number, "keywords": list(query.keywords), "geo": query.geo}},
        )
        try:
            payload = await self.upstream.fetch(
                query.keywords,
                query.geo,
                query.start_time,
                query.end_time,
            )
            if looks_like_html(payload):
                raise TransientUpstreamError(HTML_ERROR_PAGE_MESSAGE, ErrorCategory.HTML_ERROR_PAGE)
        except Exception as e:
            details = self.error_handler.handle_error(
                e,
                source="upstream",
                retry_count=attempt_number,
                max_retries=self.max_attempts,
            )
            if details.kind == FailureKind.TRANSIENT:
                raise TransientUpstreamError(details.message, details.category) from e
            raise FatalUpstreamError(details.message, details.category) from e

        return payload

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"Retrying upstream in {delay:.2f}s after attempt "
            f"{retry_state.attempt_number}/{self.max_attempts}: {error}",
            extra={"data": {
                "attempt": retry_state.attempt_number,
                "delay_seconds": round(delay, 3),
                "category": getattr(getattr(error, "category", None), "value", None),
            }},
        )

    async def fetch_with_retry(self, query: CanonicalQuery) -> UpstreamOutcome:
        """
        Fetch the upstream payload for a canonical query.

        Args:
            query: Normalized and validated query

        Returns:
            UpstreamOutcome: ``UpstreamSuccess`` with the raw payload, or
            ``UpstreamFailure`` once a fatal error occurs or the attempt
            budget is spent on transient ones
        """
        attempts = 0
        retrying = AsyncRetrying(
            sleep=self.sleep,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_random(self.min_delay, self.max_delay),
            retry=retry_if_exception_type(TransientUpstreamError),
            before_sleep=self._before_sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    payload = await self._attempt(query, attempts)
        except TransientUpstreamError as e:
            logger.error(f"Upstream retries exhausted after {attempts} attempts: {e}")
            return UpstreamFailure(FailureKind.TRANSIENT, str(e), e.category, attempts)
        except FatalUpstreamError as e:
            return UpstreamFailure(FailureKind.FATAL, str(e), e.category, attempts)

        return UpstreamSuccess(payload, attempts)


async def fetch_with_retry(
    query: CanonicalQuery,
    upstream: UpstreamClient,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_delay: float = DEFAULT_MIN_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    sleep: Sleep = asyncio.sleep,
) -> UpstreamOutcome:
    """Convenience wrapper around ``RetryOrchestrator.fetch_with_retry``."""
    orchestrator = RetryOrchestrator(upstream, max_attempts, min_delay, max_delay, sleep)
    return await orchestrator.fetch_with_retry(query)
