"""
Adapters package for the Trends Gateway.

This package contains components for integrating with the upstream provider:
- Abstract interface that defines the upstream client contract
- Concrete HTTP implementation
"""

from . import interfaces
from .implementations import HttpTrendsClient

__all__ = [
    'interfaces',
    'HttpTrendsClient',
]
