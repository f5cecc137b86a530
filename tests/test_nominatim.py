import pytest
import requests

from store_atlas.vendors import nominatim


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse(payload=[])

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, headers, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(nominatim, "_SESSION", session)
    return session


def test_search_sends_query_and_client_identifier(patch_session):
    patch_session.response = DummyResponse(payload=[{"lat": "5.6037", "lon": "-0.1870"}])

    results = nominatim.search("12 Oxford St, Accra, Ghana", user_agent="store-atlas/1.0")

    assert results == [{"lat": "5.6037", "lon": "-0.1870"}]
    url, params, headers, timeout = patch_session.calls[0]
    assert url == "https://nominatim.openstreetmap.org/search"
    assert params == {"format": "json", "limit": 1, "q": "12 Oxford St, Accra, Ghana"}
    assert headers == {"User-Agent": "store-atlas/1.0"}
    assert timeout == 10


def test_search_uses_custom_base_url_and_timeout(patch_session):
    nominatim.search("Lagos", user_agent="ua", base_url="http://localhost:8088", timeout=3)

    url, _, _, timeout = patch_session.calls[0]
    assert url == "http://localhost:8088/search"
    assert timeout == 3


def test_search_raises_on_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=503)

    with pytest.raises(requests.RequestException):
        nominatim.search("Accra", user_agent="ua")


def test_search_rejects_non_list_payload(patch_session):
    patch_session.response = DummyResponse(payload={"error": "Unable to geocode"})

    with pytest.raises(nominatim.NominatimError):
        nominatim.search("Accra", user_agent="ua")
