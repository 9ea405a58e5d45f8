"""
Unit tests for ResponseParser: optional-field defaults and provider payload quirks.
Run: pytest tests/test_response_parser.py
"""

import pytest

from src.errors import ProviderError
from src.response_parser import ResponseParser


SHOW = {
    "id": "82",
    "title": "Inception",
    "showType": "movie",
    "releaseYear": 2010,
    "rating": 85,
    "overview": "A thief who steals corporate secrets...",
    "genres": [{"id": "action", "name": "Action"}, {"id": "scifi", "name": "Science Fiction"}],
    "cast": ["Leonardo DiCaprio", "Joseph Gordon-Levitt"],
    "directors": ["Christopher Nolan"],
    "imageSet": {"verticalPoster": {"w480": "https://img.example/poster480.jpg"}},
    "streamingOptions": {
        "US": [
            {
                "service": {
                    "id": "netflix",
                    "name": "Netflix",
                    "homePage": "https://www.netflix.com/",
                    "imageSet": {"lightThemeImage": "light.svg", "darkThemeImage": "dark.svg"},
                },
                "type": "subscription",
                "link": "https://www.netflix.com/title/70131314/",
                "videoLink": "https://www.netflix.com/watch/70131314",
                "quality": "uhd",
                "audios": [{"language": "eng"}, {"language": "fra", "region": "CAN"}],
                "subtitles": [
                    {"locale": {"language": "eng"}, "closedCaptions": True},
                    {"locale": {"language": "jpn"}, "closedCaptions": False},
                ],
                "expiresOn": 1735689600,
            },
            {
                "service": {"id": "apple", "name": "Apple TV"},
                "type": "rent",
                "link": "https://tv.apple.com/movie/inception",
                "price": {"amount": "3.99", "currency": "USD", "formatted": "3.99 USD"},
            },
            {"type": "free", "link": "https://nowhere"},
        ]
    },
}


def test_full_show_decodes():
    show = ResponseParser().parse_show(SHOW)
    assert show.id == "82"
    assert show.name == "Inception"
    assert show.kind == "movie"
    assert show.first_year == 2010
    assert show.poster_url == "https://img.example/poster480.jpg"
    assert [g.name for g in show.genres] == ["Action", "Science Fiction"]
    assert show.directors == ["Christopher Nolan"]

    offers = show.offers_for("us")
    assert len(offers) == 2  # option without a service is skipped
    netflix, apple = offers
    assert netflix.service.dark_image_url == "dark.svg"
    assert netflix.service.home_url == "https://www.netflix.com/"
    assert netflix.quality == "uhd"
    assert [s.language for s in netflix.subtitles] == ["eng", "jpn"]
    assert netflix.subtitles[0].closed_captions is True
    assert [(a.language, a.region) for a in netflix.audios] == [("eng", None), ("fra", "CAN")]
    assert netflix.expires_on == 1735689600
    assert apple.price.amount == 3.99
    assert apple.price.formatted == "3.99 USD"


def test_minimal_show_uses_defaults():
    show = ResponseParser().parse_show({"id": 7, "title": "Bare"})
    assert show.id == "7"
    assert show.kind == "movie"
    assert show.first_year is None
    assert show.poster_url is None
    assert show.genres == []
    assert show.cast == []
    assert show.streaming_options == {}
    assert show.offers_for("us") == []


def test_series_years_and_poster_fallback():
    show = ResponseParser().parse_show({
        "id": "s1",
        "title": "Breaking Bad",
        "showType": "series",
        "firstAirYear": 2008,
        "lastAirYear": 2013,
        "posterUrl": "https://img.example/legacy.jpg",
    })
    assert show.kind == "series"
    assert (show.first_year, show.last_year) == (2008, 2013)
    assert show.poster_url == "https://img.example/legacy.jpg"


def test_offer_with_unknown_type_and_quality_degrades():
    offer = ResponseParser().parse_offer({
        "service": {"id": "odd"},
        "type": "lease",
        "quality": "8k",
        "subtitles": None,
        "audios": "nope",
    })
    assert offer.offer_type is None
    assert offer.quality is None
    assert offer.subtitles == []
    assert offer.audios == []
    assert offer.addon is None
    assert offer.price is None
    assert offer.service.name == "odd"


def test_show_without_id_is_rejected():
    with pytest.raises(ProviderError):
        ResponseParser().parse_show({"title": "No id"})


def test_search_payload_skips_malformed_entries():
    titles = ResponseParser().parse_shows([{"id": "1", "title": "A"}, "junk", {"title": "no id"}, {"id": "2", "title": "B"}])
    assert [t.id for t in titles] == ["1", "2"]


def test_search_payload_must_be_a_list():
    with pytest.raises(ProviderError):
        ResponseParser().parse_shows({"shows": []})


def test_wrong_typed_text_fields_are_dropped():
    show = ResponseParser().parse_show({
        "id": "5",
        "title": "Odd types",
        "overview": 12345,
        "imdbId": 7,
        "tmdbId": ["movie/5"],
        "imageSet": {"verticalPoster": {"w480": 480}},
        "streamingOptions": {
            "us": [{
                "service": {"id": "netflix", "homePage": 1, "imageSet": {"darkThemeImage": {"url": "x"}}},
                "type": "subscription",
                "link": 99,
                "videoLink": 42,
                "price": {"amount": 3.99, "currency": 840, "formatted": False},
                "audios": [{"language": "eng", "region": 1}],
            }],
        },
    })
    assert show.overview is None
    assert show.imdb_id is None
    assert show.tmdb_id is None
    assert show.poster_url is None
    offer = show.offers_for("us")[0]
    assert offer.link == ""
    assert offer.video_link is None
    assert offer.service.home_url is None
    assert offer.service.dark_image_url is None
    assert offer.price.currency is None
    assert offer.price.formatted == "3.99"
    assert [(a.language, a.region) for a in offer.audios] == [("eng", None)]
