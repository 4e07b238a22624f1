"""
iTunes Core Service - Directory client for podcast search, lookup and charts.
Builds request URLs, dispatches them through the transport and feeds the
normalizer. One request per call (two for trending items), no retries.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from api.itunes.config import ITunesConfig, itunes_config
from api.itunes.enums import Country, Entity, PodcastGenre
from api.itunes.models import (
    ITunesInvalidRequestError,
    ITunesParseError,
    ITunesSearchEnvelope,
    ITunesUpstreamError,
    PodcastResult,
)
from api.itunes.normalizer import normalize_results
from api.itunes.query import (
    PODCAST_MEDIA,
    FilterSet,
    ITunesParams,
    build_query_params,
    build_trending_url,
    build_url,
)
from utils.base_api_client import BaseAPIClient, HTTPTransport
from utils.get_logger import get_logger, get_null_logger

SEARCH_PATH = "search"
LOOKUP_PATH = "lookup"
CATEGORY_TERM = "podcast"
DEFAULT_SEARCH_VERSION = 2


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def extract_trending_ids(body: bytes) -> list[str]:
    """
    Pull ``feed.results[].id`` out of a charts response body.

    Any other shape, or a body that is not JSON, yields an empty list.
    Entries whose id is not a string are skipped.
    """
    try:
        payload: Any = json.loads(body)
    except ValueError:
        return []
    if not isinstance(payload, dict):
        return []
    feed = payload.get("feed")
    if not isinstance(feed, dict):
        return []
    results = feed.get("results")
    if not isinstance(results, list):
        return []
    return [
        entry["id"]
        for entry in results
        if isinstance(entry, dict) and isinstance(entry.get("id"), str)
    ]


class ITunesPodcastService(BaseAPIClient):
    """
    Client for the iTunes search/lookup API and the Apple charts feed.

    Every operation is a coroutine. Calls share no state, so any number may
    run concurrently on the same instance.
    """

    def __init__(
        self,
        transport: HTTPTransport | None = None,
        logger: logging.Logger | None = None,
        config: ITunesConfig | None = None,
    ):
        """Initialize the service.

        Args:
            transport: HTTP transport; an aiohttp-backed one is created if omitted
            logger: Diagnostics sink; defaults follow ``config.logging_enabled``
            config: Endpoint settings (defaults to the module singleton)
        """
        self.config = config or itunes_config
        if logger is None:
            if self.config.logging_enabled:
                logger = get_logger(__name__, level=self.config.log_level)
            else:
                logger = get_null_logger(__name__)
        super().__init__(
            transport=transport,
            timeout_seconds=self.config.timeout_seconds,
            logger=logger,
        )

    # ---------- Requests ----------

    async def _fetch(self, url: str) -> bytes:
        body, status = await self._core_async_request(url)
        if not _is_success(status):
            raise ITunesUpstreamError(
                f"Request to {url} failed with status {status}",
                code=status,
                raw_response=body,
            )
        return body

    async def _perform_query(
        self, path: str, params: list[tuple[str, str]], media_type: Entity | None
    ) -> PodcastResult:
        """Run a search/lookup query and normalize the response."""
        try:
            url = build_url(self.config.api_url, path, params)
        except ValueError as e:
            self.logger.error(f"Invalid URL for {path}: {e}")
            raise ITunesUpstreamError(str(e)) from e

        body = await self._fetch(url)

        try:
            envelope = ITunesSearchEnvelope.model_validate(json.loads(body))
        except ValueError as e:
            raise ITunesParseError(
                f"Unexpected response from {url}: {e}", raw_response=body
            ) from e

        return normalize_results(
            envelope.results,
            media_type=media_type,
            total_count=envelope.result_count,
            logger=self.logger,
        )

    # ---------- Public, typed methods ----------

    async def search(self, filters: FilterSet | None = None) -> PodcastResult:
        """
        Search the directory.

        The media parameter is always "podcast"; the entity defaults to
        podcasts and episodes and the version to 2 when the filters leave
        them unset.

        Args:
            filters: Optional search constraints

        Returns:
            PodcastResult normalized for the requested entity
        """
        filters = filters or FilterSet()
        filters = replace(
            filters,
            entity=filters.entity or Entity.PODCAST_AND_EPISODE,
            version=filters.version if filters.version is not None else DEFAULT_SEARCH_VERSION,
        )

        params = build_query_params(filters)
        params.append((ITunesParams.MEDIA, PODCAST_MEDIA))
        return await self._perform_query(SEARCH_PATH, params, filters.entity)

    async def lookup(self, ids: Sequence[str]) -> PodcastResult:
        """
        Look up podcasts by collection id, in the given order.

        Raises:
            ITunesInvalidRequestError: If ``ids`` is empty (nothing is sent)
        """
        if not ids:
            self.logger.error("Empty podcast ID list for lookup")
            raise ITunesInvalidRequestError("At least one podcast id is required", code=400)

        params = [
            (ITunesParams.ID, ",".join(str(podcast_id) for podcast_id in ids)),
            (ITunesParams.MEDIA, PODCAST_MEDIA),
        ]
        return await self._perform_query(LOOKUP_PATH, params, Entity.PODCAST)

    async def trending_ids(self, country: Country, limit: int) -> list[str]:
        """
        Fetch the chart-ordered ids of the top podcasts in a storefront.

        Returns:
            Ids in chart order; empty if the body lacks ``feed.results``

        Raises:
            ITunesUpstreamError: Non-2xx status or a URL that cannot be built
        """
        try:
            url = build_trending_url(self.config.trending_host, country, limit)
        except ValueError as e:
            self.logger.error(f"Failed to create valid URL for trending podcasts: {e}")
            raise ITunesUpstreamError(str(e)) from e

        body = await self._fetch(url)
        ids = extract_trending_ids(body)
        if not ids:
            self.logger.warning(f"No trending podcast ids in response from {url}")
        return ids

    async def trending_items(self, country: Country, limit: int) -> PodcastResult:
        """
        Fetch the top podcasts of a storefront as full results.

        Runs ``trending_ids`` then ``lookup``; an empty chart returns an
        empty result without a lookup request.
        """
        ids = await self.trending_ids(country, limit)
        if not ids:
            return PodcastResult.empty(media_type=Entity.PODCAST)
        return await self.lookup(ids)

    async def by_category(
        self, genre: PodcastGenre, entity: Entity, limit: int
    ) -> PodcastResult:
        """
        List podcasts in a genre.

        Args:
            genre: Genre to filter by
            entity: Entity kind to request and normalize for
            limit: Maximum number of results the backend should return
        """
        filters = FilterSet(term=CATEGORY_TERM, entity=entity, genre=genre)
        params = build_query_params(filters)
        params.append((ITunesParams.LIMIT, str(limit)))
        return await self._perform_query(SEARCH_PATH, params, entity)
