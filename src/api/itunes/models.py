"""
iTunes Podcast Models - raw directory records and the public podcast model.
Raw records are plain dataclasses built leniently from JSON; public models
follow Pydantic 2.0 patterns.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api.itunes.enums import Country, Entity

# Image locator used when a record carries no usable artwork
EMPTY_IMAGE_URL = ""


# ============================================================================
# Errors
# ============================================================================


class ITunesError(Exception):
    """Base error for the iTunes directory client."""

    def __init__(self, message: str, code: int | None = None, raw_response: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.raw_response = raw_response


class ITunesInvalidRequestError(ITunesError):
    """The caller supplied input that can never be satisfied. No request was sent."""


class ITunesUpstreamError(ITunesError):
    """
    The backend answered with a non-success status, or the request URL
    could not be built. ``code`` holds the HTTP status when there was one.
    """


class ITunesParseError(ITunesError):
    """A search/lookup response body is not JSON or lacks the results envelope."""


# ---------------------------
# Lenient field readers
# ---------------------------


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _opt_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _opt_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def parse_release_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp. Absent or unparsable values give None."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# ---------------------------
# Raw directory record
# ---------------------------


@dataclass(eq=False)
class ITunesSearchResult:
    """One object from the ``results`` array, every field optional."""

    collection_id: int | None = None
    track_id: int | None = None
    wrapper_type: str | None = None
    kind: str | None = None

    artist_name: str | None = None
    collection_name: str | None = None
    track_name: str | None = None
    collection_censored_name: str | None = None
    track_censored_name: str | None = None
    primary_genre_name: str | None = None
    genre_ids: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)

    feed_url: str | None = None
    collection_view_url: str | None = None
    track_view_url: str | None = None
    artwork_url_30: str | None = None
    artwork_url_60: str | None = None
    artwork_url_100: str | None = None
    artwork_url_600: str | None = None

    release_date: datetime | None = None
    collection_price: float | None = None
    track_price: float | None = None
    track_rental_price: float | None = None
    collection_hd_price: float | None = None
    track_hd_price: float | None = None
    track_hd_rental_price: float | None = None
    collection_explicitness: str | None = None
    track_explicitness: str | None = None
    track_count: int | None = None
    country: str | None = None
    currency: str | None = None
    content_advisory_rating: str | None = None

    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    # Artwork, pricing and counts are volatile and do not identify a record
    IDENTITY_FIELDS = (
        "collection_id",
        "track_id",
        "artist_name",
        "collection_name",
        "track_name",
        "feed_url",
        "collection_view_url",
        "primary_genre_name",
    )

    @staticmethod
    def from_dict(d: Any) -> ITunesSearchResult:
        """Build a record from a JSON object. Never raises; bad fields become None/empty."""
        if not isinstance(d, Mapping):
            return ITunesSearchResult()

        collection_id = _opt_int(d.get("collectionId"))
        track_id = _opt_int(d.get("trackId"))
        return ITunesSearchResult(
            collection_id=collection_id,
            track_id=track_id if track_id is not None else collection_id,
            wrapper_type=_opt_str(d.get("wrapperType")),
            kind=_opt_str(d.get("kind")),
            artist_name=_opt_str(d.get("artistName")),
            collection_name=_opt_str(d.get("collectionName")),
            track_name=_opt_str(d.get("trackName")),
            collection_censored_name=_opt_str(d.get("collectionCensoredName")),
            track_censored_name=_opt_str(d.get("trackCensoredName")),
            primary_genre_name=_opt_str(d.get("primaryGenreName")),
            genre_ids=_str_list(d.get("genreIds")),
            genres=_str_list(d.get("genres")),
            feed_url=_opt_str(d.get("feedUrl")),
            collection_view_url=_opt_str(d.get("collectionViewUrl")),
            track_view_url=_opt_str(d.get("trackViewUrl")),
            artwork_url_30=_opt_str(d.get("artworkUrl30")),
            artwork_url_60=_opt_str(d.get("artworkUrl60")),
            artwork_url_100=_opt_str(d.get("artworkUrl100")),
            artwork_url_600=_opt_str(d.get("artworkUrl600")),
            release_date=parse_release_date(d.get("releaseDate")),
            collection_price=_opt_float(d.get("collectionPrice")),
            track_price=_opt_float(d.get("trackPrice")),
            track_rental_price=_opt_float(d.get("trackRentalPrice")),
            collection_hd_price=_opt_float(d.get("collectionHdPrice")),
            track_hd_price=_opt_float(d.get("trackHdPrice")),
            track_hd_rental_price=_opt_float(d.get("trackHdRentalPrice")),
            collection_explicitness=_opt_str(d.get("collectionExplicitness")),
            track_explicitness=_opt_str(d.get("trackExplicitness")),
            track_count=_opt_int(d.get("trackCount")),
            country=_opt_str(d.get("country")),
            currency=_opt_str(d.get("currency")),
            content_advisory_rating=_opt_str(d.get("contentAdvisoryRating")),
            raw=d,
        )

    def _identity(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self.IDENTITY_FIELDS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ITunesSearchResult):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


def select_image(record: ITunesSearchResult) -> str:
    """Artwork precedence: 600px, then 100px, then the empty locator."""
    if record.artwork_url_600 is not None:
        return record.artwork_url_600
    if record.artwork_url_100 is not None:
        return record.artwork_url_100
    return EMPTY_IMAGE_URL


# ============================================================================
# Envelopes
# ============================================================================


class ITunesSearchEnvelope(BaseModel):
    """Top level of a search/lookup response. Both keys are required."""

    result_count: int = Field(..., alias="resultCount")
    results: list[Any]


# ============================================================================
# Public models
# ============================================================================


class ITunesBaseModel(BaseModel):
    """Base model with to_json/to_dict helpers."""

    def to_json(self, **kwargs: Any) -> str:
        return self.model_dump_json(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ITunesPodcast(ITunesBaseModel):
    """
    Public podcast model, built once per raw record and immutable afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="String form of collectionId")
    title: str | None = Field(default=None, description="Track name")
    image: str = Field(default=EMPTY_IMAGE_URL, description="Best artwork URL, never None")
    publication_date: datetime | None = Field(default=None, description="Release date")
    author: str = Field(default="", description="Artist name, empty if absent")
    is_podcast: bool = Field(default=False, description="Requested entity was podcast")
    feed_url: str | None = Field(default=None, description="RSS feed URL")

    @classmethod
    def from_search_result(
        cls, record: ITunesSearchResult, media_type: Entity | None
    ) -> ITunesPodcast:
        """
        Project a raw record into the public model.

        Raises:
            ValueError: If the record has no collectionId
        """
        if record.collection_id is None:
            raise ValueError("Missing required field: collectionId")
        return cls(
            id=str(record.collection_id),
            title=record.track_name,
            image=select_image(record),
            publication_date=record.release_date,
            author=record.artist_name if record.artist_name is not None else "",
            is_podcast=media_type == Entity.PODCAST,
            feed_url=record.feed_url,
        )


class PodcastResult(ITunesBaseModel):
    """
    Normalized result set. ``total_count`` is what the backend reported and
    is never reconciled with ``len(podcasts)``; ``dropped_count`` counts the
    records that could not be normalized.
    """

    total_count: int = 0
    podcasts: list[ITunesPodcast] = Field(default_factory=list)
    dropped_count: int = 0
    media_type: Entity | None = None
    error: str | None = None
    status_code: int = 200

    @classmethod
    def empty(cls, media_type: Entity | None = None) -> PodcastResult:
        return cls(total_count=0, podcasts=[], media_type=media_type)


class TrendingIdsResponse(ITunesBaseModel):
    """Trending podcast ids for one storefront, in chart order."""

    ids: list[str] = Field(default_factory=list)
    country: Country | None = None
    limit: int = 0
    error: str | None = None
    status_code: int = 200
