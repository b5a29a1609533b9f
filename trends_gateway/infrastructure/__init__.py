"""
Infrastructure package for the Trends Gateway.
"""
