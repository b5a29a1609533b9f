"""
Interfaces package for the Trends Gateway.

Contains the abstract contract the gateway uses to talk to the upstream provider.
"""

from .upstream import UpstreamClient

__all__ = [
    'UpstreamClient',
]
