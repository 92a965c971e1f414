import json
import logging

import pytest
import requests

from aqs import _client
from aqs.endpoints import Endpoint
from aqs.errors import AQSRemoteError, MalformedResponseError, TransportError

SUCCESS_BODY = {
    "Header": [
        {
            "status": "Success",
            "request_time": "2024-03-01T10:00:00-05:00",
            "url": "https://aqs.epa.gov/data/api/dailyData/bySite?email=test@example.com&key=secretkey&param=44201",
            "rows": 2,
        }
    ],
    "Data": [
        {"state_code": "06", "county_code": "001", "site_number": "0007", "arithmetic_mean": 0.031},
        {"state_code": "06", "county_code": "001", "site_number": "0007", "arithmetic_mean": 0.028},
    ],
}


class DummyResp:
    def __init__(self, status_code=200, headers=None, body=None, text=None):
        self.status_code = status_code
        self.headers = headers or {}
        self._body = body
        self._text = text

    def raise_for_status(self):
        if 400 <= self.status_code:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._body


class DummySession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.urls = []
        self.timeouts = []
        self.closed = False

    def get(self, url, timeout=None):
        self.urls.append(url)
        self.timeouts.append(timeout)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    waits = []
    monkeypatch.setattr(_client.time, "sleep", waits.append)
    return waits


def test_build_url_puts_credentials_and_fields_in_query(user):
    url = _client.build_url("dailyData", Endpoint.BY_STATE, user, {"param": "44201,42101", "state": "06"})
    assert url.startswith("https://aqs.epa.gov/data/api/dailyData/byState?")
    assert "email=test%40example.com" in url
    assert "key=secretkey" in url
    assert "param=44201%2C42101" in url
    assert "state=06" in url


def test_redact_hides_email_and_key():
    url = "https://aqs.epa.gov/data/api/dailyData/bySite?email=a@b.org&key=abc&param=1"
    assert _client.redact(url) == "https://aqs.epa.gov/data/api/dailyData/bySite?email=***&key=***&param=1"


def test_parse_response_splits_header_and_data():
    result = _client.parse_response(SUCCESS_BODY)
    assert result.status == "Success"
    assert result.rows == 2
    assert list(result.data.columns) == ["state_code", "county_code", "site_number", "arithmetic_mean"]
    assert "secretkey" not in result.url
    assert result.records()[1]["arithmetic_mean"] == 0.028


def test_parse_response_no_data_matched_is_empty():
    body = {"Header": [{"status": "No data matched your selection", "rows": 0}], "Data": []}
    result = _client.parse_response(body)
    assert result.empty
    assert result.status == "No data matched your selection"


def test_parse_response_failed_status_raises():
    body = {"Header": [{"status": "Failed", "error": ["Invalid key"]}], "Data": []}
    with pytest.raises(AQSRemoteError) as info:
        _client.parse_response(body)
    assert info.value.messages == ["Invalid key"]
    assert info.value.status == "Failed"


@pytest.mark.parametrize(
    "payload",
    [
        [{"status": "Success"}, []],
        {"Data": []},
        {"Header": [{"status": "Success"}]},
        {"Header": [{"status": "Success"}], "Data": {"rows": 1}},
    ],
)
def test_parse_response_rejects_unexpected_shapes(payload):
    with pytest.raises(MalformedResponseError):
        _client.parse_response(payload)


def test_fetch_json_passes_timeout():
    session = DummySession([DummyResp(body=SUCCESS_BODY)])
    assert _client.fetch_json(session, "https://example.invalid/api", retries=0, timeout=7) == SUCCESS_BODY
    assert session.timeouts == [7]


def test_client_error_is_not_retried():
    session = DummySession([DummyResp(400), DummyResp(body=SUCCESS_BODY)])
    with pytest.raises(TransportError) as info:
        _client.fetch_json(session, "https://example.invalid/api?email=a&key=b", retries=3)
    assert info.value.status_code == 400
    assert len(session.urls) == 1
    assert "key=***" in info.value.url


def test_server_errors_are_retried_then_succeed(no_sleep):
    session = DummySession([DummyResp(503), DummyResp(500), DummyResp(body=SUCCESS_BODY)])
    assert _client.fetch_json(session, "https://example.invalid/api", retries=3) == SUCCESS_BODY
    assert len(session.urls) == 3
    assert len(no_sleep) == 2


def test_server_errors_exhaust_retries():
    session = DummySession([DummyResp(500) for _ in range(3)])
    with pytest.raises(TransportError) as info:
        _client.fetch_json(session, "https://example.invalid/api", retries=2)
    assert info.value.status_code == 500
    assert len(session.urls) == 3


def test_rate_limit_honors_retry_after(no_sleep):
    session = DummySession([DummyResp(429, headers={"Retry-After": "3"}), DummyResp(body=SUCCESS_BODY)])
    _client.fetch_json(session, "https://example.invalid/api", retries=1)
    assert no_sleep == [3]


def test_timeouts_become_transport_errors():
    session = DummySession([requests.exceptions.Timeout("slow"), requests.exceptions.ConnectionError("down")])
    with pytest.raises(TransportError) as info:
        _client.fetch_json(session, "https://example.invalid/api", retries=1)
    assert info.value.status_code is None
    assert len(session.urls) == 2


def test_invalid_json_is_retried_then_malformed():
    session = DummySession([DummyResp(text="<html>"), DummyResp(text="{oops")])
    with pytest.raises(MalformedResponseError):
        _client.fetch_json(session, "https://example.invalid/api", retries=1)
    assert len(session.urls) == 2


def test_aqs_get_uses_supplied_session_and_leaves_it_open(user):
    session = DummySession([DummyResp(body=SUCCESS_BODY)])
    result = _client.aqs_get("dailyData", "bySite", user, {"param": "44201"}, session=session, retries=0)
    assert result.rows == 2
    assert session.urls[0].startswith("https://aqs.epa.gov/data/api/dailyData/bySite?")
    assert session.closed is False


def test_aqs_get_closes_its_own_session(user, monkeypatch):
    session = DummySession([DummyResp(body=SUCCESS_BODY)])
    monkeypatch.setattr(_client, "make_session", lambda timeout=None: session)
    _client.aqs_get("annualData", "byState", user, {"param": "44201"}, retries=0, base_url="https://mirror.invalid/api/")
    assert session.closed is True
    assert session.urls[0].startswith("https://mirror.invalid/api/annualData/byState?")


def test_credentials_never_logged(user, caplog):
    session = DummySession([DummyResp(500)])
    with caplog.at_level(logging.DEBUG, logger="aqs"):
        with pytest.raises(TransportError):
            _client.aqs_get("sampleData", "byState", user, {"state": "06"}, session=session, retries=0)
    assert caplog.records
    assert "secretkey" not in caplog.text
    assert "test@example.com" not in caplog.text
    assert "test%40example.com" not in caplog.text


def test_make_session_sets_user_agent_and_timeout():
    session = _client.make_session(timeout=11, min_delay=0)
    try:
        assert session.timeout == 11
        assert session.headers["User-Agent"].startswith("aqs-query/")
    finally:
        session.close()


class FakeClock:
    def __init__(self, readings):
        self._readings = iter(readings)
        self.slept = []

    def monotonic(self):
        return next(self._readings)

    def sleep(self, seconds):
        self.slept.append(seconds)


def test_pacer_waits_between_requests(monkeypatch):
    clock = FakeClock([100.0, 100.0, 101.0, 105.0])
    monkeypatch.setattr(_client, "time", clock)
    pacer = _client._Pacer(min_delay=5)
    pacer.wait()
    pacer.wait()
    assert clock.slept == [4.0]


def test_pacer_disabled_never_sleeps(monkeypatch):
    clock = FakeClock([])
    monkeypatch.setattr(_client, "time", clock)
    pacer = _client._Pacer(min_delay=0)
    pacer.wait()
    pacer.wait()
    assert clock.slept == []
