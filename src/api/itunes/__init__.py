"""
iTunes Podcast Service Package - podcast directory client for the iTunes API.

This package provides:
- ITunesPodcastService: Core client for search, lookup and charts
- Query builder and code tables for search filters
- Models: raw records, Pydantic public models and errors
- Wrappers: error-safe async wrappers
"""

from api.itunes.core import ITunesPodcastService
from api.itunes.enums import Country, Entity, Language, PodcastGenre
from api.itunes.models import (
    EMPTY_IMAGE_URL,
    ITunesError,
    ITunesInvalidRequestError,
    ITunesParseError,
    ITunesPodcast,
    ITunesSearchResult,
    ITunesUpstreamError,
    PodcastResult,
    TrendingIdsResponse,
)
from api.itunes.normalizer import normalize_results
from api.itunes.query import FilterSet, build_query_params
from api.itunes.wrappers import ITunesWrapper, itunes_wrapper

__all__ = [
    # Core
    "ITunesPodcastService",
    # Query
    "FilterSet",
    "build_query_params",
    # Vocabulary
    "Country",
    "Entity",
    "Language",
    "PodcastGenre",
    # Models
    "EMPTY_IMAGE_URL",
    "ITunesSearchResult",
    "ITunesPodcast",
    "PodcastResult",
    "TrendingIdsResponse",
    "normalize_results",
    # Errors
    "ITunesError",
    "ITunesInvalidRequestError",
    "ITunesParseError",
    "ITunesUpstreamError",
    # Wrappers
    "ITunesWrapper",
    "itunes_wrapper",
]
