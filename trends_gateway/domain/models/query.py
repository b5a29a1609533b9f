from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple, Union


KeywordInput = Union[str, List[str], Tuple[str, ...], None]


@dataclass(frozen=True)
class RawQuery:
    """Untyped query parameters exactly as the client sent them."""

    keyword: KeywordInput = None
    geo: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


@dataclass(frozen=True)
class CanonicalQuery:
    """
    Normalized, validated form of a client query.

    ``keywords`` is never empty and ``geo`` is always a member of the
    configured allow-list.
    """

    keywords: Tuple[str, ...]
    geo: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def __post_init__(self):
        if not self.keywords:
            raise ValueError("CanonicalQuery requires at least one keyword")

    @property
    def keyword_count(self) -> int:
        return len(self.keywords)
