"""
HTTP API package for the Trends Gateway.
"""
