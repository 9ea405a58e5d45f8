"""
API tests for the FastAPI server with an injected fake provider client.
Run: pytest tests/test_api.py
"""

import pytest
from fastapi.testclient import TestClient

from api import create_app
from src.catalog import CatalogService
from src.config import Settings
from src.errors import GENERIC_ERROR_MESSAGE, NotFoundError, ProviderError
from src.formatting import show_path
from src.response_parser import ResponseParser


SHOW_PAYLOAD = {
    "id": "82",
    "title": "Inception",
    "showType": "movie",
    "releaseYear": 2010,
    "rating": 85,
    "genres": [{"id": "scifi", "name": "Science Fiction"}],
    "streamingOptions": {
        "us": [
            {"service": {"id": "netflix", "name": "Netflix"}, "type": "subscription", "link": "https://netflix/82",
             "quality": "hd", "subtitles": [{"locale": {"language": "eng"}}], "audios": [{"language": "eng"}]},
            {"service": {"id": "netflix", "name": "Netflix"}, "type": "addon", "link": "https://netflix/addon",
             "addon": {"id": "x", "name": "X"}},
            {"service": {"id": "hulu", "name": "Hulu"}, "type": "rent", "link": "https://hulu/82",
             "price": {"amount": "3.99", "currency": "USD", "formatted": "3.99 USD"}},
        ],
        "gb": [
            {"service": {"id": "apple", "name": "Apple TV"}, "type": "buy", "link": "https://apple/82"},
        ],
    },
}


class FakeClient:
    """Duck-typed stand-in for AvailabilityClient."""

    def __init__(self, search_error=None, show_error=None):
        self.parser = ResponseParser()
        self.search_calls = []
        self.search_error = search_error
        self.show_error = show_error

    def search(self, title, country="us"):
        self.search_calls.append((title, country))
        if self.search_error:
            raise self.search_error
        return self.parser.parse_shows([SHOW_PAYLOAD, {"id": "99", "title": "Inception: The Cobol Job", "showType": "movie"}])

    def get_by_id(self, show_id, country="us"):
        if self.show_error:
            raise self.show_error
        if show_id != "82":
            raise NotFoundError(show_id)
        return self.parser.parse_show(SHOW_PAYLOAD)


def make_client(fake=None):
    fake = fake or FakeClient()
    settings = Settings(_env_file=None, rapidapi_key="test", search_debounce_ms=200)
    app = create_app(catalog=CatalogService(client=fake), settings=settings)
    return TestClient(app), fake


def test_health():
    client, _ = make_client()
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["adapter_ready"] is True


def test_countries_filter():
    client, _ = make_client()
    body = client.get("/countries", params={"q": "japan"}).json()
    assert body == [{"code": "jp", "name": "Japan", "flag": "🇯🇵"}]
    assert len(client.get("/countries").json()) >= 60


def test_search_returns_titles():
    client, fake = make_client()
    resp = client.get("/search", params={"q": " Inception ", "country": "gb"})
    assert resp.status_code == 200
    body = resp.json()
    assert [r["title"] for r in body["results"]] == ["Inception", "Inception: The Cobol Job"]
    assert body["results"][0]["years"] == "2010"
    assert body["results"][1]["years"] == "N/A"
    assert fake.search_calls == [("Inception", "gb")]


@pytest.mark.parametrize("q", ["", "a", "  a  "])
def test_short_query_is_not_searched(q):
    client, fake = make_client()
    resp = client.get("/search", params={"q": q})
    assert resp.status_code == 200
    assert resp.json()["results"] == []
    assert fake.search_calls == []


def test_search_provider_failure_is_generic_502():
    client, _ = make_client(FakeClient(search_error=ProviderError("socket exploded")))
    resp = client.get("/search", params={"q": "Inception"})
    assert resp.status_code == 502
    assert resp.json()["detail"] == GENERIC_ERROR_MESSAGE
    assert "socket" not in resp.text


def test_show_streaming_options_are_normalized():
    client, _ = make_client()
    body = client.get("/show/82", params={"country": "us"}).json()

    assert body["show"]["title"] == "Inception"
    assert body["country_name"] == "United States"
    assert body["available"] is True
    options = body["streaming_options"]
    assert [o["service"]["id"] for o in options] == ["netflix"]
    assert options[0]["addon"] is None
    assert options[0]["has_english_subtitles"] is True
    assert options[0]["has_japanese_subtitles"] is False
    assert options[0]["quality"] == "HD"
    assert options[0]["audios"] == "ENG"


def test_show_include_paid():
    client, _ = make_client()
    body = client.get("/show/82", params={"country": "us", "include_paid": "true"}).json()
    assert [o["service"]["id"] for o in body["streaming_options"]] == ["netflix", "hulu"]
    assert body["streaming_options"][1]["price"] == "3.99 USD"


def test_nothing_streamable_is_not_an_error():
    client, _ = make_client()
    for country in ("gb", "zz"):
        resp = client.get("/show/82", params={"country": country})
        assert resp.status_code == 200
        assert resp.json()["available"] is False
        assert resp.json()["streaming_options"] == []
    assert client.get("/show/82", params={"country": "zz"}).json()["country_name"] == "zz"


def test_show_not_found_is_404():
    client, _ = make_client()
    resp = client.get("/show/nope")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Show not found"


def test_show_provider_failure_is_502():
    client, _ = make_client(FakeClient(show_error=ProviderError("HTTP 500", status_code=500)))
    resp = client.get("/show/82")
    assert resp.status_code == 502
    assert resp.json()["detail"] == GENERIC_ERROR_MESSAGE


def test_websocket_live_search_answers_latest_query():
    client, fake = make_client()
    with client.websocket_connect("/ws/search") as ws:
        ws.send_json({"q": "i", "country": "us"})
        ws.send_json({"q": "inc", "country": "us"})
        ws.send_json({"q": "inception", "country": "us"})
        message = ws.receive_json()
    assert message["query"] == "inception"
    assert [r["title"] for r in message["results"]][0] == "Inception"
    assert fake.search_calls == [("inception", "us")]


def test_websocket_reports_provider_errors_generically():
    client, _ = make_client(FakeClient(search_error=ProviderError("HTTP 503", status_code=503)))
    with client.websocket_connect("/ws/search") as ws:
        ws.send_json({"q": "inception"})
        message = ws.receive_json()
    assert message["error"] == GENERIC_ERROR_MESSAGE
    assert message["country"] == "us"


class OddTypesClient(FakeClient):
    """Provider that returns numbers where strings are expected."""

    ODD = {
        "id": "5",
        "title": "Odd types",
        "overview": 12345,
        "imdbId": 7,
        "streamingOptions": {"us": [{"service": {"id": "netflix"}, "type": "free", "link": "https://n/5", "videoLink": 42}]},
    }

    def search(self, title, country="us"):
        self.search_calls.append((title, country))
        return self.parser.parse_shows([self.ODD])

    def get_by_id(self, show_id, country="us"):
        return self.parser.parse_show(self.ODD)


def test_wrong_typed_provider_fields_still_serve():
    client, _ = make_client(OddTypesClient())
    resp = client.get("/search", params={"q": "odd"})
    assert resp.status_code == 200
    assert resp.json()["results"][0]["overview"] is None

    resp = client.get("/show/5")
    assert resp.status_code == 200
    assert resp.json()["streaming_options"][0]["watch_url"] == "https://n/5"


def make_client_for_country(default_country):
    fake = FakeClient()
    settings = Settings(_env_file=None, rapidapi_key="test", default_country=default_country, search_debounce_ms=50)
    app = create_app(catalog=CatalogService(client=fake), settings=settings)
    return TestClient(app), fake


def test_configured_default_country_is_used():
    client, fake = make_client_for_country("GB")
    body = client.get("/search", params={"q": "Inception"}).json()
    assert body["country"] == "gb"
    assert fake.search_calls == [("Inception", "gb")]

    body = client.get("/show/82").json()
    assert body["country"] == "gb"
    assert body["country_name"] == "United Kingdom"

    with client.websocket_connect("/ws/search") as ws:
        ws.send_json({"q": "inception"})
        message = ws.receive_json()
    assert message["country"] == "gb"


def test_websocket_skips_non_json_frames():
    client, fake = make_client()
    with client.websocket_connect("/ws/search") as ws:
        ws.send_text("not json")
        ws.send_json(["not", "an", "object"])
        ws.send_json({"q": "inception", "country": "us"})
        message = ws.receive_json()
    assert message["query"] == "inception"
    assert fake.search_calls == [("inception", "us")]


def test_show_path_reaches_the_show_route():
    client, _ = make_client()
    assert client.get(show_path("82")).json()["show"]["id"] == "82"
    resp = client.get(show_path("no such show"))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Show not found"


def test_default_country_env_applies_after_startup(monkeypatch):
    monkeypatch.setenv("RAPIDAPI_KEY", "test")
    monkeypatch.setenv("DEFAULT_COUNTRY", "gb")
    fake = FakeClient()
    app = create_app(catalog=CatalogService(client=fake))  # settings come from the environment
    with TestClient(app) as client:
        assert client.get("/search", params={"q": "Inception"}).json()["country"] == "gb"
    assert fake.search_calls == [("Inception", "gb")]
