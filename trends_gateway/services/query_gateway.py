import asyncio
import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from trends_gateway.adapters.interfaces.upstream import UpstreamClient
from trends_gateway.core.config import Settings
from trends_gateway.core.logging import get_logger
from trends_gateway.domain.models.outcome import UpstreamFailure
from trends_gateway.domain.models.query import CanonicalQuery, KeywordInput, RawQuery
from trends_gateway.infrastructure.error.fallback import FallbackPolicy
from trends_gateway.services.geo_validator import validate_geo
from trends_gateway.services.keyword_normalizer import normalize_keywords
from trends_gateway.services.response_assembler import ResponseAssembler
from trends_gateway.services.retry_orchestrator import RetryOrchestrator, Sleep

logger = get_logger(__name__)

# Inputs exercised by the parsing diagnostics report, one per supported encoding.
PARSING_SAMPLES: List[KeywordInput] = [
    "artificial intelligence",
    "AI,machine learning,robotics",
    "AI|machine learning|robotics",
    "AI;machine learning;robotics",
    '["AI","machine learning","robotics"]',
    ["AI", "machine learning", "robotics"],
]


def parse_timestamp(value: Optional[str], field: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or date-time string.

    Unparseable values are dropped with a warning so a bad time window never
    fails the request.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning(
            f"Ignoring unparseable {field} '{value}'",
            extra={"data": {"field": field, "value": value}},
        )
        return None


class QueryGateway:
    """
    Façade composing normalization, validation, resilient fetch and assembly.

    Every collaborator is handed in at construction, so tests can inject an
    upstream stub, a fake sleep and a seeded random source.
    """

    def __init__(
        self,
        settings: Settings,
        upstream: UpstreamClient,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.upstream = upstream
        self.orchestrator = RetryOrchestrator(
            upstream,
            max_attempts=settings.MAX_ATTEMPTS,
            min_delay=settings.RETRY_MIN_DELAY,
            max_delay=settings.RETRY_MAX_DELAY,
            sleep=sleep,
        )
        self.assembler = ResponseAssembler(
            policy=FallbackPolicy(settings.TRANSIENT_FAILURE_POLICY),
            retry_after=settings.RATE_LIMIT_RETRY_AFTER,
            fallback_days=settings.FALLBACK_DAYS,
            rng=rng,
        )

    def canonicalize(self, raw: RawQuery) -> CanonicalQuery:
        """Normalize keywords, validate geo and parse the time window."""
        keywords = normalize_keywords(raw.keyword, default=self.settings.DEFAULT_KEYWORD)
        logger.info(
            f"Normalized keywords: {keywords}",
            extra={"data": {"raw_keyword": raw.keyword, "keywords": keywords}},
        )

        geo = validate_geo(raw.geo, self.settings.ALLOWED_GEOS, default=self.settings.DEFAULT_GEO)

        return CanonicalQuery(
            keywords=tuple(keywords),
            geo=geo,
            start_time=parse_timestamp(raw.start_time, "startTime"),
            end_time=parse_timestamp(raw.end_time, "endTime"),
        )

    async def handle_query(self, raw: RawQuery) -> Dict[str, Any]:
        """
        Run one query through the whole pipeline.

        Args:
            raw: Query parameters as received

        Returns:
            Dict[str, Any]: The response envelope

        Raises:
            RateLimitError: When the surface policy applies
            UpstreamFatalError: When the upstream failed fatally
        """
        logger.info(
            "Received trends query",
            extra={"data": {
                "keyword": raw.keyword,
                "geo": raw.geo,
                "startTime": raw.start_time,
                "endTime": raw.end_time,
            }},
        )

        query = self.canonicalize(raw)
        outcome = await self.orchestrator.fetch_with_retry(query)

        if isinstance(outcome, UpstreamFailure) and outcome.is_transient:
            logger.warning(
                f"Upstream unavailable after {outcome.attempts} attempts, "
                f"applying '{self.assembler.policy.value}' policy",
                extra={"data": {"category": outcome.category.value if outcome.category else None}},
            )

        return self.assembler.assemble(outcome, query)

    def parsing_diagnostics(self) -> List[Dict[str, Any]]:
        """Run the keyword normalizer against one sample of every supported encoding."""
        return [
            {
                "input": sample,
                "output": normalize_keywords(sample, default=self.settings.DEFAULT_KEYWORD),
            }
            for sample in PARSING_SAMPLES
        ]
