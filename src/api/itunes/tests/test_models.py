"""
Tests for iTunes raw records and Pydantic models.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from api.itunes.enums import Entity
from api.itunes.models import (
    EMPTY_IMAGE_URL,
    ITunesPodcast,
    ITunesSearchEnvelope,
    ITunesSearchResult,
    PodcastResult,
    parse_release_date,
    select_image,
)

pytestmark = pytest.mark.unit


class TestITunesSearchResult:
    """Tests for ITunesSearchResult.from_dict."""

    def test_full_record(self, search_payload):
        record = ITunesSearchResult.from_dict(search_payload["results"][0])

        assert record.collection_id == 1200361736
        assert record.track_id == 1200361736
        assert record.artist_name == "The New York Times"
        assert record.collection_name == "The Daily"
        assert record.track_name == "The Daily"
        assert record.feed_url == "https://feeds.simplecast.com/54nAGcIl"
        assert record.artwork_url_30.endswith("30x30bb.jpg")
        assert record.artwork_url_600.endswith("600x600bb.jpg")
        assert record.release_date == datetime(2024, 5, 1, 9, 45, tzinfo=UTC)
        assert record.collection_price == 0.0
        assert record.collection_hd_price == 0.0
        assert record.track_rental_price is None
        assert record.track_count == 2000
        assert record.collection_explicitness == "notExplicit"
        assert record.genre_ids == ["1526", "26", "1489"]
        assert record.genres == ["Daily News", "Podcasts", "News"]
        assert record.content_advisory_rating == "Clean"

    def test_empty_object_never_raises(self):
        record = ITunesSearchResult.from_dict({})

        assert record.collection_id is None
        assert record.artist_name is None
        assert record.release_date is None
        assert record.genre_ids == []
        assert record.genres == []

    def test_non_mapping_input_degrades_to_empty_record(self):
        record = ITunesSearchResult.from_dict(["not", "an", "object"])

        assert record.collection_id is None
        assert record.track_name is None

    def test_wrong_types_become_none(self):
        record = ITunesSearchResult.from_dict(
            {
                "collectionId": "123",
                "artistName": 42,
                "trackCount": True,
                "collectionPrice": "free",
                "releaseDate": 20240501,
                "genreIds": "1301",
            }
        )

        assert record.collection_id is None
        assert record.artist_name is None
        assert record.track_count is None
        assert record.collection_price is None
        assert record.release_date is None
        assert record.genre_ids == []

    def test_empty_string_is_distinct_from_absent(self):
        record = ITunesSearchResult.from_dict({"collectionId": 1, "trackName": ""})

        assert record.track_name == ""
        assert record.artist_name is None

    def test_track_id_falls_back_to_collection_id(self):
        record = ITunesSearchResult.from_dict({"collectionId": 77})

        assert record.track_id == 77

    def test_unparsable_release_date_is_none(self, search_payload):
        record = ITunesSearchResult.from_dict(search_payload["results"][2])

        assert record.release_date is None
        assert record.genre_ids == ["1321"]
        assert record.genres == []


class TestSearchResultEquality:
    """Equality covers identity and display fields only."""

    BASE = {
        "collectionId": 10,
        "trackId": 10,
        "artistName": "Host",
        "collectionName": "Show",
        "trackName": "Show",
        "feedUrl": "https://example.com/feed.xml",
        "collectionViewUrl": "https://podcasts.apple.com/show/id10",
        "primaryGenreName": "Comedy",
    }

    def test_volatile_fields_are_ignored(self):
        a = ITunesSearchResult.from_dict(
            {**self.BASE, "artworkUrl600": "https://a/600.jpg", "trackCount": 5, "trackPrice": 0}
        )
        b = ITunesSearchResult.from_dict(
            {**self.BASE, "artworkUrl600": "https://b/600.jpg", "trackCount": 9}
        )

        assert a == b
        assert hash(a) == hash(b)

    def test_identity_fields_are_compared(self):
        a = ITunesSearchResult.from_dict(self.BASE)
        b = ITunesSearchResult.from_dict({**self.BASE, "primaryGenreName": "News"})

        assert a != b

    def test_not_equal_to_other_types(self):
        assert ITunesSearchResult.from_dict(self.BASE) != self.BASE


class TestReleaseDate:
    """Tests for parse_release_date."""

    def test_zulu_suffix(self):
        assert parse_release_date("2023-01-02T03:04:05Z") == datetime(2023, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_offset_is_kept(self):
        parsed = parse_release_date("2023-01-02T03:04:05+02:00")

        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed.tzinfo == timezone(timedelta(hours=2))

    def test_naive_value_is_taken_as_utc(self):
        assert parse_release_date("2023-01-02T03:04:05") == datetime(
            2023, 1, 2, 3, 4, 5, tzinfo=UTC
        )

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345, []])
    def test_invalid_values(self, value):
        assert parse_release_date(value) is None


class TestImageSelection:
    """Artwork precedence."""

    def test_600_wins_over_100(self):
        record = ITunesSearchResult.from_dict(
            {"artworkUrl600": "https://x/600.jpg", "artworkUrl100": "https://x/100.jpg"}
        )

        assert select_image(record) == "https://x/600.jpg"

    def test_falls_back_to_100(self):
        record = ITunesSearchResult.from_dict(
            {"artworkUrl100": "https://x/100.jpg", "artworkUrl60": "https://x/60.jpg"}
        )

        assert select_image(record) == "https://x/100.jpg"

    def test_smaller_artwork_is_not_used(self):
        record = ITunesSearchResult.from_dict(
            {"artworkUrl60": "https://x/60.jpg", "artworkUrl30": "https://x/30.jpg"}
        )

        assert select_image(record) == EMPTY_IMAGE_URL


class TestITunesPodcast:
    """Tests for ITunesPodcast.from_search_result."""

    def test_minimal_record(self):
        record = ITunesSearchResult.from_dict(
            {"collectionId": 1535809341, "artistName": "Jane Doe", "collectionName": "Minimal"}
        )

        podcast = ITunesPodcast.from_search_result(record, Entity.PODCAST)

        assert podcast.id == "1535809341"
        assert podcast.author == "Jane Doe"
        assert podcast.title is None
        assert podcast.image == EMPTY_IMAGE_URL
        assert podcast.publication_date is None
        assert podcast.feed_url is None

    def test_full_record(self, search_payload):
        record = ITunesSearchResult.from_dict(search_payload["results"][0])

        podcast = ITunesPodcast.from_search_result(record, Entity.PODCAST)

        assert podcast.id == "1200361736"
        assert podcast.title == "The Daily"
        assert podcast.image == "https://is1-ssl.mzstatic.com/image/thumb/daily/600x600bb.jpg"
        assert podcast.publication_date == datetime(2024, 5, 1, 9, 45, tzinfo=UTC)
        assert podcast.author == "The New York Times"
        assert podcast.feed_url == "https://feeds.simplecast.com/54nAGcIl"

    def test_missing_author_becomes_empty_string(self):
        podcast = ITunesPodcast.from_search_result(
            ITunesSearchResult.from_dict({"collectionId": 5}), None
        )

        assert podcast.author == ""

    @pytest.mark.parametrize(
        "media_type,expected",
        [
            (Entity.PODCAST, True),
            (Entity.PODCAST_EPISODE, False),
            (Entity.PODCAST_AND_EPISODE, False),
            (None, False),
        ],
    )
    def test_is_podcast_follows_requested_entity(self, media_type, expected):
        record = ITunesSearchResult.from_dict({"collectionId": 5, "kind": "podcast-episode"})

        assert ITunesPodcast.from_search_result(record, media_type).is_podcast is expected

    def test_missing_collection_id_raises(self):
        with pytest.raises(ValueError, match="collectionId"):
            ITunesPodcast.from_search_result(ITunesSearchResult.from_dict({}), Entity.PODCAST)

    def test_model_is_frozen(self):
        podcast = ITunesPodcast(id="1")

        with pytest.raises(ValidationError):
            podcast.title = "changed"

    def test_to_dict(self):
        podcast = ITunesPodcast(
            id="1", publication_date=datetime(2024, 1, 1, tzinfo=UTC), is_podcast=True
        )

        data = podcast.to_dict()

        assert data["id"] == "1"
        assert data["image"] == ""
        assert data["is_podcast"] is True
        assert data["publication_date"].startswith("2024-01-01T00:00:00")


class TestEnvelopeAndResult:
    """Tests for ITunesSearchEnvelope and PodcastResult."""

    def test_envelope_requires_both_keys(self):
        with pytest.raises(ValidationError):
            ITunesSearchEnvelope.model_validate({"results": []})
        with pytest.raises(ValidationError):
            ITunesSearchEnvelope.model_validate({"resultCount": 1})

    def test_envelope_reads_alias(self, lookup_payload):
        envelope = ITunesSearchEnvelope.model_validate(lookup_payload)

        assert envelope.result_count == 2
        assert len(envelope.results) == 2

    def test_empty_result(self):
        result = PodcastResult.empty(media_type=Entity.PODCAST)

        assert result.total_count == 0
        assert result.podcasts == []
        assert result.dropped_count == 0
        assert result.error is None
        assert result.status_code == 200
        assert result.to_dict()["media_type"] == "podcast"
