"""
Adapters for external calculation backends.
"""
