from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import httpx

from trends_gateway.adapters.interfaces.upstream import UpstreamClient
from trends_gateway.core.exceptions import UpstreamRequestError
from trends_gateway.core.logging import get_logger

logger = get_logger(__name__)


class HttpTrendsClient(UpstreamClient):
    """
    Upstream client that fetches interest-over-time data over HTTP.

    Non-2xx responses are turned into ``UpstreamRequestError`` whose message
    carries the status code and reason phrase, so a ``429 Too Many Requests``
    reads as rate limiting to the failure classifier.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Endpoint serving interest-over-time data
            timeout: Per-request timeout in seconds
            http_client: Optional pre-configured client (used in tests)
        """
        self.base_url = base_url
        self.timeout = timeout
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        """The underlying client, created on first use."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    @staticmethod
    def build_params(
        keywords: Sequence[str],
        geo: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[Tuple[str, Any]]:
        params: List[Tuple[str, Any]] = [("keyword", k) for k in keywords]
        params.append(("geo", geo))
        if start_time is not None:
            params.append(("startTime", start_time.isoformat()))
        if end_time is not None:
            params.append(("endTime", end_time.isoformat()))
        return params

    async def fetch(
        self,
        keywords: Sequence[str],
        geo: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> str:
        params = self.build_params(keywords, geo, start_time, end_time)
        logger.debug(f"Requesting {self.base_url} for keywords={list(keywords)} geo={geo}")

        try:
            response = await self.http_client.get(
                self.base_url,
                params=params,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise UpstreamRequestError(
                f"Upstream responded with HTTP {status_code} {e.response.reason_phrase}".rstrip(),
                status_code=status_code,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamRequestError(
                f"Failed to connect to upstream: {type(e).__name__}: {str(e)}"
            ) from e

        return response.text

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()

