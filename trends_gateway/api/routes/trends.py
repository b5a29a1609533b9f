from fastapi import APIRouter, Depends, status
from typing import Any, Dict

from trends_gateway.api.dependencies import get_query_gateway, get_raw_query
from trends_gateway.core.logging import get_logger
from trends_gateway.domain.models.query import RawQuery
from trends_gateway.services.query_gateway import QueryGateway

# Initialize router and logger
trends_router = APIRouter()
logger = get_logger(__name__)


@trends_router.get(
    "/trends",
    status_code=status.HTTP_200_OK,
    summary="Interest over time",
    description=(
        "Returns interest-over-time data for one or more keywords. "
        "Keywords may be a plain string, a comma, pipe or semicolon separated list, "
        "a bracketed JSON list, or a repeated parameter. When the upstream keeps "
        "failing transiently a synthetic timeline is returned with searchMeta.fallback=true."
    ),
)
async def get_trends(
    raw_query: RawQuery = Depends(get_raw_query),
    gateway: QueryGateway = Depends(get_query_gateway),
) -> Dict[str, Any]:
    """
    Trends query endpoint.

    Args:
        raw_query: Decoded query parameters
        gateway: Query gateway dependency

    Returns:
        Dict[str, Any]: Response envelope
    """
    return await gateway.handle_query(raw_query)
