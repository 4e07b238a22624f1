"""
iTunes Async Wrappers - error-safe entry points over ITunesPodcastService.
Failures come back as response models with ``error`` and ``status_code`` set.
"""

import aiohttp

from api.itunes.core import ITunesPodcastService
from api.itunes.enums import Country, Entity, PodcastGenre
from api.itunes.models import (
    ITunesError,
    ITunesInvalidRequestError,
    ITunesUpstreamError,
    PodcastResult,
    TrendingIdsResponse,
)
from api.itunes.query import FilterSet


def _status_for(error: Exception) -> int:
    if isinstance(error, ITunesInvalidRequestError):
        return 400
    if isinstance(error, ITunesUpstreamError):
        return error.code or 502
    return 500


_HANDLED_ERRORS = (ITunesError, aiohttp.ClientError, TimeoutError)


class ITunesWrapper:
    def __init__(self, service: ITunesPodcastService | None = None):
        self._service = service

    @property
    def service(self) -> ITunesPodcastService:
        # Created on first use so importing this module never opens a session
        if self._service is None:
            self._service = ITunesPodcastService()
        return self._service

    def _error_result(
        self, operation: str, error: Exception, media_type: Entity | None
    ) -> PodcastResult:
        self.service.logger.error(f"Error in {operation}: {error}")
        return PodcastResult(
            total_count=0,
            podcasts=[],
            media_type=media_type,
            error=str(error),
            status_code=_status_for(error),
        )

    async def search(self, filters: FilterSet | None = None) -> PodcastResult:
        """
        Async wrapper function to search podcasts.

        Returns:
            PodcastResult: search results or error information
        """
        try:
            return await self.service.search(filters)
        except _HANDLED_ERRORS as e:
            entity = filters.entity if filters and filters.entity else Entity.PODCAST_AND_EPISODE
            return self._error_result("search", e, entity)

    async def lookup(self, ids: list[str]) -> PodcastResult:
        """Async wrapper function to look up podcasts by id."""
        try:
            return await self.service.lookup(ids)
        except _HANDLED_ERRORS as e:
            return self._error_result("lookup", e, Entity.PODCAST)

    async def trending_ids(self, country: Country, limit: int) -> TrendingIdsResponse:
        """Async wrapper function to get trending podcast ids."""
        try:
            ids = await self.service.trending_ids(country, limit)
            return TrendingIdsResponse(ids=ids, country=country, limit=limit)
        except _HANDLED_ERRORS as e:
            self.service.logger.error(f"Error in trending_ids: {e}")
            return TrendingIdsResponse(
                ids=[],
                country=country,
                limit=limit,
                error=str(e),
                status_code=_status_for(e),
            )

    async def trending_items(self, country: Country, limit: int) -> PodcastResult:
        """Async wrapper function to get trending podcasts."""
        try:
            return await self.service.trending_items(country, limit)
        except _HANDLED_ERRORS as e:
            return self._error_result("trending_items", e, Entity.PODCAST)

    async def by_category(self, genre: PodcastGenre, entity: Entity, limit: int) -> PodcastResult:
        """Async wrapper function to list podcasts of a genre."""
        try:
            return await self.service.by_category(genre, entity, limit)
        except _HANDLED_ERRORS as e:
            return self._error_result("by_category", e, entity)

    async def close(self) -> None:
        if self._service is not None:
            await self._service.close()


itunes_wrapper = ITunesWrapper()
