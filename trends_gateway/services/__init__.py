from trends_gateway.services.geo_validator import validate_geo
from trends_gateway.services.keyword_normalizer import normalize_keywords
from trends_gateway.services.query_gateway import QueryGateway
from trends_gateway.services.response_assembler import ResponseAssembler, assemble
from trends_gateway.services.retry_orchestrator import RetryOrchestrator, fetch_with_retry

__all__ = [
    "QueryGateway",
    "ResponseAssembler",
    "RetryOrchestrator",
    "assemble",
    "fetch_with_retry",
    "normalize_keywords",
    "validate_geo",
]
