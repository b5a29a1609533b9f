from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SearchMeta:
    """Request metadata attached to every response envelope under ``searchMeta``."""

    keywords: List[str]
    geo: str
    timestamp: datetime
    fallback: bool
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys clients expect."""
        data = {
            "keywords": list(self.keywords),
            "geo": self.geo,
            "startTime": self.start_time.isoformat() if self.start_time else "default",
            "endTime": self.end_time.isoformat() if self.end_time else "now",
            "timestamp": self.timestamp.isoformat(),
            "fallback": self.fallback,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def build_envelope(payload: Dict[str, Any], keyword_count: int, meta: SearchMeta) -> Dict[str, Any]:
    """Merge an upstream (or synthetic) payload with request metadata."""
    envelope = dict(payload)
    envelope["searchedKeywordCount"] = keyword_count
    envelope["searchMeta"] = meta.to_dict()
    return envelope
