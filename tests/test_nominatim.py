import threading

import pytest
import requests

from geoproximity.core.config import ConfigError, Settings
from geoproximity.vendors import nominatim


class DummyResponse:
    def __init__(self, status_code=200, payload=None, body_error=None):
        self.status_code = status_code
        self._payload = payload
        self._body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._payload


class DummySession:
    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response
        self.error = error

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def make_client(session, **overrides):
    settings = Settings(**overrides)
    return nominatim.NominatimClient(settings, session=session)


def test_reverse_sends_expected_request():
    session = DummySession(DummyResponse(payload={"display_name": "Cairo, Egypt", "address": {}}))
    client = make_client(session, user_agent="GearUp-App/1.0", request_timeout=5)

    payload = client.reverse(30.0444, 31.2357)

    assert payload["display_name"] == "Cairo, Egypt"
    url, params, headers, timeout = session.calls[0]
    assert url == "https://nominatim.openstreetmap.org/reverse"
    assert params == {"lat": 30.0444, "lon": 31.2357, "format": "json", "zoom": 18, "addressdetails": 1}
    assert headers == {"User-Agent": "GearUp-App/1.0"}
    assert timeout == 5


def test_reverse_passes_accept_language():
    session = DummySession(DummyResponse(payload={"display_name": "x"}))
    client = make_client(session, accept_language="ar")

    client.reverse(1.0, 2.0)

    assert session.calls[0][1]["accept-language"] == "ar"


def test_client_requires_user_agent():
    with pytest.raises(ConfigError):
        make_client(DummySession(), user_agent="")


def test_reverse_http_error():
    client = make_client(DummySession(DummyResponse(status_code=503)))
    with pytest.raises(nominatim.GeocodeError):
        client.reverse(1.0, 2.0)


def test_reverse_network_error():
    client = make_client(DummySession(error=requests.ConnectionError("unreachable")))
    with pytest.raises(nominatim.GeocodeError):
        client.reverse(1.0, 2.0)


def test_reverse_timeout_is_not_retried():
    session = DummySession(error=requests.Timeout("slow"))
    client = make_client(session)

    with pytest.raises(nominatim.GeocodeError):
        client.reverse(1.0, 2.0)

    assert len(session.calls) == 1


def test_reverse_malformed_body():
    client = make_client(DummySession(DummyResponse(body_error=ValueError("not json"))))
    with pytest.raises(nominatim.GeocodeError):
        client.reverse(1.0, 2.0)


def test_reverse_non_object_body():
    client = make_client(DummySession(DummyResponse(payload=["unexpected"])))
    with pytest.raises(nominatim.GeocodeError):
        client.reverse(1.0, 2.0)


def test_reverse_provider_error_payload():
    client = make_client(DummySession(DummyResponse(payload={"error": "Unable to geocode"})))
    with pytest.raises(nominatim.GeocodeError, match="no address found"):
        client.reverse(0.0, -30.0)


def test_client_without_session_uses_one_session_per_thread(monkeypatch):
    created = []

    def fake_session():
        session = DummySession(DummyResponse(payload={"display_name": "x"}))
        created.append(session)
        return session

    monkeypatch.setattr(nominatim.requests, "Session", fake_session)
    client = nominatim.NominatimClient(Settings())

    client.reverse(1.0, 2.0)
    client.reverse(3.0, 4.0)
    worker = threading.Thread(target=client.reverse, args=(5.0, 6.0))
    worker.start()
    worker.join()

    assert len(created) == 2
    assert [len(session.calls) for session in created] == [2, 1]


def test_injected_session_is_used_as_is():
    session = DummySession(DummyResponse(payload={"display_name": "x"}))
    client = make_client(session)

    client.reverse(1.0, 2.0)
    worker = threading.Thread(target=client.reverse, args=(3.0, 4.0))
    worker.start()
    worker.join()

    assert len(session.calls) == 2
