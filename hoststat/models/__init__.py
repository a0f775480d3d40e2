"""
Data models shared by collectors and the output side.
"""

from .sample import Number, Sample

__all__ = [
    "Number",
    "Sample",
]
