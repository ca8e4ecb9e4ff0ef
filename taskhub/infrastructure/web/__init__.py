"""
HTTP adapter.
"""
