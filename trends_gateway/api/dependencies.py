from fastapi import Request
from typing import List, Optional

from trends_gateway.core.config import Settings
from trends_gateway.core.logging import get_logger
from trends_gateway.domain.models.query import KeywordInput, RawQuery
from trends_gateway.services.query_gateway import QueryGateway

# Initialize logger
logger = get_logger(__name__)

# Parameter names accepted for keywords, including Express-style array keys.
KEYWORD_PARAMS = ("keyword", "keywords", "keyword[]", "keywords[]")


async def get_query_gateway(request: Request) -> QueryGateway:
    """
    Dependency providing the gateway built at application startup.

    Returns:
        QueryGateway: The application's query gateway
    """
    return request.app.state.gateway


async def get_app_settings(request: Request) -> Settings:
    """
    Dependency providing the settings the application was created with.

    Returns:
        Settings: Application settings
    """
    return request.app.state.settings


def _first(values: List[str]) -> Optional[str]:
    return values[0] if values else None


async def get_raw_query(request: Request) -> RawQuery:
    """
    Decode query parameters into a RawQuery.

    Repeated keyword parameters (under any accepted name) are merged into a
    list; a single occurrence stays a string so the normalizer can split it.

    Returns:
        RawQuery: Undecoded query fields
    """
    params = request.query_params

    values: List[str] = []
    for name in KEYWORD_PARAMS:
        values.extend(params.getlist(name))

    keyword: KeywordInput
    if not values:
        keyword = None
    elif len(values) == 1:
        keyword = values[0]
    else:
        keyword = values

    return RawQuery(
        keyword=keyword,
        geo=_first(params.getlist("geo")),
        start_time=_first(params.getlist("startTime")),
        end_time=_first(params.getlist("endTime")),
    )
