"""Utility modules"""

from .encoding import detect_encoding

__all__ = [
    "detect_encoding",
]
