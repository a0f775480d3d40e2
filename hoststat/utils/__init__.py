"""
Utility functions and helpers.
"""

from .host import HostQueryError, NotSupportedError, PsutilSource

__all__ = [
    "HostQueryError",
    "NotSupportedError",
    "PsutilSource",
]
