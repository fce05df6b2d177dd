"""Data extractors for source records."""

from .base import BaseExtractor
from .api_extractor import APIExtractor
from .file_extractor import JSONFileExtractor

__all__ = [
    "BaseExtractor",
    "APIExtractor",
    "JSONFileExtractor",
]
