from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence


class UpstreamClient(ABC):
    """
    Abstract base interface for the trends data provider.

    The gateway treats the provider as opaque: one call in, either raw text
    or an exception with a descriptive message out. Implementations must be
    safe to call concurrently and must never return partial results.
    """

    @abstractmethod
    async def fetch(
        self,
        keywords: Sequence[str],
        geo: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> str:
        """
        Retrieves interest-over-time data from the provider.

        Args:
            keywords: Canonical search terms, in order
            geo: Allow-listed geography code
            start_time: Optional start of the time window
            end_time: Optional end of the time window

        Returns:
            str: The raw response body

        Raises:
            Exception: Any failure, described by its message
        """
        pass

    async def close(self) -> None:
        """Releases any resources held by the client."""
        return None
