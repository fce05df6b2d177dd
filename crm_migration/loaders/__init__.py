"""Data loaders for the destination service."""

from .base import BaseLoader, LoadResult
from .api_loader import BatchAPILoader

__all__ = [
    "BaseLoader",
    "LoadResult",
    "BatchAPILoader",
]
