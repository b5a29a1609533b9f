"""
Trends Gateway - resilient front door for a search trends provider.

This package normalizes loosely-structured trend queries, fetches them from an
unreliable upstream with jittered retries, and degrades to synthetic data when
the upstream keeps failing.
"""

__version__ = "0.1.0"
