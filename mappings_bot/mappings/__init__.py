"""
Mapping model and sources.
"""

from .types import LookupAnswer, Mapping, MappingType
from .database import MappingDatabase
from .downloader import JsonMappingDownloader, MappingDownloader

__all__ = [
    "LookupAnswer",
    "Mapping",
    "MappingType",
    "MappingDatabase",
    "MappingDownloader",
    "JsonMappingDownloader",
]
