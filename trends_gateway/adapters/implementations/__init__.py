from .http_trends import HttpTrendsClient

__all__ = [
    'HttpTrendsClient',
]
