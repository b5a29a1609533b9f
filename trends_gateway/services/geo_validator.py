from typing import Collection, Optional

from trends_gateway.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_GEO = "US"


def validate_geo(geo: Optional[str], allowed: Collection[str], default: str = DEFAULT_GEO) -> str:
    """
    Restrict a geography code to the allow-list.

    Values outside the allow-list are replaced by ``default`` rather than
    rejected. Matching is exact; ``"us"`` is not ``"US"``.

    Args:
        geo: Geography code from the request, if any
        allowed: Allow-listed geography codes
        default: Code used for absent or disallowed values

    Returns:
        str: ``geo`` if allowed, otherwise ``default``
    """
    if geo is None:
        logger.debug(f"No geo supplied, using default '{default}'")
        return default

    if geo not in allowed:
        logger.warning(
            f"Geo '{geo}' is not allowed, using default '{default}'",
            extra={"data": {"requested_geo": geo, "geo": default}},
        )
        return default

    return geo
