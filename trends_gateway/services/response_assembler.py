import json
import random
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from trends_gateway.core.exceptions import RateLimitError, UpstreamFatalError
from trends_gateway.core.logging import get_logger
from trends_gateway.domain.models.envelope import SearchMeta, build_envelope
from trends_gateway.domain.models.outcome import UpstreamFailure, UpstreamOutcome, UpstreamSuccess
from trends_gateway.domain.models.query import CanonicalQuery
from trends_gateway.infrastructure.error.fallback import (
    DEFAULT_FALLBACK_DAYS,
    FallbackPolicy,
    synthesize_timeline,
)
from trends_gateway.infrastructure.error.handler import is_rate_limit_category

logger = get_logger(__name__)

DEFAULT_RETRY_AFTER = 300  # seconds


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseAssembler:
    """Turns an upstream outcome into the caller-visible response envelope."""

    def __init__(
        self,
        policy: FallbackPolicy = FallbackPolicy.DEGRADE,
        retry_after: int = DEFAULT_RETRY_AFTER,
        fallback_days: int = DEFAULT_FALLBACK_DAYS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.policy = FallbackPolicy(policy)
        self.retry_after = retry_after
        self.fallback_days = fallback_days
        self.rng = rng
        self.clock = clock

    def _meta(self, query: CanonicalQuery, fallback: bool, error: Optional[str] = None) -> SearchMeta:
        return SearchMeta(
            keywords=list(query.keywords),
            geo=query.geo,
            timestamp=self.clock(),
            fallback=fallback,
            start_time=query.start_time,
            end_time=query.end_time,
            error=error,
        )

    def assemble(self, outcome: UpstreamOutcome, query: CanonicalQuery) -> Dict[str, Any]:
        """
        Build the response envelope for one request.

        Args:
            outcome: Result of the retry orchestrator
            query: The canonical query the outcome belongs to

        Returns:
            Dict[str, Any]: Upstream payload (or synthetic timeline) merged
            with ``searchedKeywordCount`` and ``searchMeta``

        Raises:
            RateLimitError: Under the surface policy, when retries were spent
                on rate limiting, blocking or CAPTCHA challenges
            UpstreamFatalError: On fatal upstream failures and undecodable payloads
        """
        if isinstance(outcome, UpstreamSuccess):
            return self.assemble_success(outcome, query)
        if outcome.is_transient:
            return self.assemble_transient_failure(outcome, query)
        raise UpstreamFatalError(
            detail=outcome.message,
            original_error=outcome.message,
            context={"attempts": outcome.attempts},
        )

    def assemble_success(self, outcome: UpstreamSuccess, query: CanonicalQuery) -> Dict[str, Any]:
        try:
            parsed = json.loads(outcome.payload)
        except (ValueError, RecursionError) as e:
            logger.error(f"Upstream payload is not valid JSON: {str(e)}")
            raise UpstreamFatalError(
                detail="Upstream returned a malformed payload",
                original_error=str(e),
            ) from e

        payload = parsed if isinstance(parsed, dict) else {"data": parsed}
        return build_envelope(payload, query.keyword_count, self._meta(query, fallback=False))

    def assemble_transient_failure(self, outcome: UpstreamFailure, query: CanonicalQuery) -> Dict[str, Any]:
        if self.policy == FallbackPolicy.SURFACE and is_rate_limit_category(outcome.category):
            logger.warning(
                f"Surfacing upstream rate limit to caller: {outcome.message}",
                extra={"data": {"retry_after": self.retry_after, "attempts": outcome.attempts}},
            )
            raise RateLimitError(
                detail="Upstream is rate limiting requests, please retry later",
                retry_after=self.retry_after,
                context={"reason": outcome.message},
            )

        return self.build_fallback(query, outcome.message)

    def build_fallback(self, query: CanonicalQuery, error: str) -> Dict[str, Any]:
        now = self.clock()
        payload = synthesize_timeline(
            query.keywords,
            days=self.fallback_days,
            today=now.date(),
            rng=self.rng,
        )
        logger.warning(
            f"Serving fallback data for {list(query.keywords)}: {error}",
            extra={"data": {"fallback": True, "keywords": list(query.keywords), "geo": query.geo}},
        )
        return build_envelope(payload, query.keyword_count, self._meta(query, fallback=True, error=error))


def assemble(
    outcome: UpstreamOutcome,
    query: CanonicalQuery,
    policy: FallbackPolicy = FallbackPolicy.DEGRADE,
    retry_after: int = DEFAULT_RETRY_AFTER,
) -> Dict[str, Any]:
    """Convenience wrapper around ``ResponseAssembler.assemble``."""
    return ResponseAssembler(policy=policy, retry_after=retry_after).assemble(outcome, query)
