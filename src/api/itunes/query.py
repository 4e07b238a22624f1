"""
iTunes Query Builder - turns optional filters into ordered query parameters.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote, urlencode

from yarl import URL

from api.itunes.enums import Country, Entity, Language, PodcastGenre

# "+" carries the term's word separators, "," joins lookup ids
QUERY_SAFE_CHARS = "+,"

PODCAST_MEDIA = "podcast"

_HOST_RE = re.compile(r"^[A-Za-z0-9.-]+$")


class ITunesParams:
    """Query parameter names understood by the search and lookup endpoints."""

    TERM = "term"
    COUNTRY = "country"
    MEDIA = "media"
    ENTITY = "entity"
    ATTRIBUTE = "attribute"
    GENRE_ID = "genreId"
    LIMIT = "limit"
    LANG = "lang"
    VERSION = "version"
    EXPLICIT = "explicit"
    ID = "id"


@dataclass(frozen=True)
class FilterSet:
    """Caller-supplied search constraints. Every field is optional and independent."""

    term: str | None = None
    country: Country | None = None
    entity: Entity | None = None
    attribute: str | None = None
    genre: PodcastGenre | None = None
    language: Language | None = None
    version: int | None = None
    explicit: str | None = None


def build_query_params(filters: FilterSet) -> list[tuple[str, str]]:
    """
    Build the ordered (key, value) pairs for the filters that are set.

    An empty term is still emitted; only None means unset. Spaces in the
    term become a literal "+", everything else is left to URL encoding.
    """
    params: list[tuple[str, str]] = []

    if filters.term is not None:
        params.append((ITunesParams.TERM, filters.term.replace(" ", "+")))
    if filters.country is not None:
        params.append((ITunesParams.COUNTRY, filters.country.code))
    if filters.entity is not None:
        params.append((ITunesParams.ENTITY, filters.entity.code))
    if filters.attribute is not None:
        params.append((ITunesParams.ATTRIBUTE, filters.attribute))
    if filters.genre is not None:
        params.append((ITunesParams.GENRE_ID, filters.genre.code))
    if filters.language is not None:
        params.append((ITunesParams.LANG, filters.language.code))
    if filters.version is not None:
        params.append((ITunesParams.VERSION, str(filters.version)))
    if filters.explicit is not None:
        params.append((ITunesParams.EXPLICIT, filters.explicit))

    return params


def encode_query(params: Iterable[tuple[str, str]]) -> str:
    """Percent-encode the pairs, keeping "+" and "," literal."""
    return urlencode(list(params), safe=QUERY_SAFE_CHARS, quote_via=quote)


def build_url(base_url: str, path: str, params: Iterable[tuple[str, str]] = ()) -> str:
    """
    Join ``base_url`` and ``path`` and append the encoded query.

    Raises:
        ValueError: If the result is not an absolute http(s) URL
    """
    url = base_url.rstrip("/") + "/" + path.lstrip("/")
    query = encode_query(params)
    if query:
        url = f"{url}?{query}"
    validate_url(url)
    return url


def build_trending_url(host: str, country: Country, limit: int) -> str:
    """
    Build the charts URL, a path-templated resource with no query string.

    Raises:
        ValueError: If the host or path cannot form a valid URL
    """
    if not _HOST_RE.match(host or ""):
        raise ValueError(f"Invalid trending host: {host!r}")
    path = f"/api/v2/{country.code}/podcasts/top/{int(limit)}/podcasts.json"
    try:
        url = str(URL.build(scheme="https", host=host, path=path))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Cannot build trending URL for host {host!r}: {e}") from e
    validate_url(url)
    return url


def validate_url(url: str) -> None:
    parsed = URL(url, encoded=True)
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"Invalid URL: {url}")
