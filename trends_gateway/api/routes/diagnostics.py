from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import List, Union

from trends_gateway.api.dependencies import get_query_gateway
from trends_gateway.core.logging import get_logger
from trends_gateway.services.query_gateway import QueryGateway

# Initialize router and logger
diagnostics_router = APIRouter()
logger = get_logger(__name__)


class ParsingCase(BaseModel):
    """One keyword input paired with its normalized form."""
    input: Union[str, List[str]]
    output: List[str]


class ParsingReport(BaseModel):
    """Keyword parsing diagnostics."""
    tests: List[ParsingCase]


@diagnostics_router.get(
    "/test-parsing",
    response_model=ParsingReport,
    status_code=status.HTTP_200_OK,
    summary="Keyword parsing diagnostics",
    description="Runs the keyword normalizer against one sample of every supported encoding.",
)
async def get_parsing_report(gateway: QueryGateway = Depends(get_query_gateway)) -> ParsingReport:
    logger.debug("Parsing diagnostics requested")
    return ParsingReport(tests=[ParsingCase(**case) for case in gateway.parsing_diagnostics()])
