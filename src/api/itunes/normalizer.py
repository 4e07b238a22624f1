"""
iTunes Result Normalizer - maps raw result arrays onto the public model.
"""

import logging
from typing import Any

from api.itunes.enums import Entity
from api.itunes.models import ITunesPodcast, ITunesSearchResult, PodcastResult
from utils.get_logger import get_null_logger


def normalize_results(
    results: list[Any],
    media_type: Entity | None,
    total_count: int,
    logger: logging.Logger | None = None,
) -> PodcastResult:
    """
    Normalize a backend ``results`` array.

    Order follows the backend. A record that cannot be projected is dropped
    and counted in ``dropped_count``; ``total_count`` stays as reported.

    Args:
        results: The raw ``results`` array
        media_type: Entity kind the request asked for
        total_count: Backend-reported ``resultCount``
        logger: Optional logger for drop diagnostics
    """
    log = logger or get_null_logger(__name__)
    podcasts: list[ITunesPodcast] = []
    dropped = 0

    for index, item in enumerate(results):
        record = ITunesSearchResult.from_dict(item)
        try:
            podcasts.append(ITunesPodcast.from_search_result(record, media_type))
        except ValueError as e:
            dropped += 1
            log.debug(f"Dropped result #{index}: {e}")

    if dropped:
        log.info(f"Normalized {len(podcasts)} of {len(results)} results ({dropped} dropped)")

    return PodcastResult(
        total_count=total_count,
        podcasts=podcasts,
        dropped_count=dropped,
        media_type=media_type,
    )
