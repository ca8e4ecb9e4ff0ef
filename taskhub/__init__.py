"""
taskhub - multi-tenant task tracker core.
"""

__version__ = "1.0.0"
