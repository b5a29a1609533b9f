"""
Fallback mechanism for the Trends Gateway.
Provides the synthetic payload served when the upstream cannot be reached reliably.
"""
import random
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


DEFAULT_FALLBACK_DAYS = 30
MIN_INTEREST = 1
MAX_INTEREST = 100


class FallbackPolicy(str, Enum):
    """What to do once transient upstream failures exhaust the retry budget."""
    DEGRADE = "degrade"   # Return a synthetic timeline shaped like a real answer
    SURFACE = "surface"   # Return a rate-limit signal so the caller backs off


def fallback_dates(days: int = DEFAULT_FALLBACK_DAYS, today: Optional[date] = None) -> List[date]:
    """
    Calendar dates covered by a fallback timeline, oldest first, ending today.

    Args:
        days: Number of daily points
        today: Last date of the series, defaults to the current UTC date

    Returns:
        List[date]: ``days`` consecutive dates
    """
    today = today or datetime.now(timezone.utc).date()
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def synthesize_timeline(
    keywords: Sequence[str],
    days: int = DEFAULT_FALLBACK_DAYS,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Build a synthetic interest-over-time payload.

    Every point carries one pseudo-random interest value in [1, 100] per
    keyword, mirroring the ``default.timelineData`` layout of the upstream.

    Args:
        keywords: Canonical keywords of the request
        days: Number of daily points
        today: Last date of the series, defaults to the current UTC date
        rng: Random source, defaults to the module-level generator

    Returns:
        Dict[str, Any]: Payload with a ``default`` section
    """
    rng = rng or random
    timeline = []
    for day in fallback_dates(days, today):
        values = [rng.randint(MIN_INTEREST, MAX_INTEREST) for _ in keywords]
        timeline.append({
            "time": day.isoformat(),
            "timestamp": str(int(datetime.combine(day, time.min, tzinfo=timezone.utc).timestamp())),
            "formattedTime": f"{day:%b} {day.day}, {day.year}",
            "formattedAxisTime": f"{day:%b} {day.day}",
            "value": values,
            "hasData": [True for _ in values],
            "formattedValue": [str(v) for v in values],
        })

    return {
        "default": {
            "timelineData": timeline,
            "averages": [],
        }
    }
