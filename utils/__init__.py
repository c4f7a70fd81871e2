"""Utility modules"""

from .loader import load_collaborator

__all__ = [
    "load_collaborator",
]
