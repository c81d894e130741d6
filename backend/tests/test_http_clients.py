from __future__ import annotations

import http.client
import io
import json
from datetime import datetime, timezone
from typing import Any, Dict, List
from urllib import error as urllib_error

import pytest

from backend.app import http_client
from backend.app.billing import AdaptyBillingClient
from backend.app.errors import UpstreamUnavailable
from backend.app.notifications import OneSignalDispatchClient


class _FakeResponse:
    def __init__(self, body: Any) -> None:
        self._body = body

    def read(self) -> bytes:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


class _Transport:
    """Records outgoing requests and replays queued outcomes."""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.outcomes: List[Any] = []

    def queue(self, *outcomes: Any) -> None:
        self.outcomes.extend(outcomes)

    def urlopen(self, req, timeout):
        self.requests.append(
            {
                "url": req.full_url,
                "method": req.get_method(),
                "headers": {key.lower(): value for key, value in req.header_items()},
                "body": json.loads(req.data.decode("utf-8")) if req.data else None,
                "timeout": timeout,
            }
        )
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, _FakeResponse):
            return outcome
        return _FakeResponse(outcome)


@pytest.fixture
def transport(monkeypatch) -> _Transport:
    fake = _Transport()
    monkeypatch.setattr(http_client.urllib_request, "urlopen", fake.urlopen)
    return fake


def _billing_client() -> AdaptyBillingClient:
    return AdaptyBillingClient(api_key="secret_live", base_url="https://api.adapty.io/", timeout=3.0)


def _dispatch_client() -> OneSignalDispatchClient:
    return OneSignalDispatchClient(api_key="os-key", base_url="https://api.onesignal.com", timeout=4.0)


def _http_error(url: str, code: int) -> urllib_error.HTTPError:
    return urllib_error.HTTPError(url, code, "error", hdrs=None, fp=io.BytesIO(b"{}"))


def test_billing_profile_request(transport) -> None:
    body = {
        "data": {
            "access_levels": [
                {"access_level_id": "premium", "expires_at": "2030-01-01T00:00:00.000000+0000"},
            ]
        }
    }
    transport.queue(json.dumps(body).encode("utf-8"))

    profile = _billing_client().fetch_profile("user-1")

    request = transport.requests[0]
    assert request["url"] == "https://api.adapty.io/api/v2/server-side-api/profile/"
    assert request["method"] == "GET"
    assert request["headers"]["authorization"] == "Api-Key secret_live"
    assert request["headers"]["adapty-customer-user-id"] == "user-1"
    assert request["body"] is None
    assert request["timeout"] == 3.0
    assert profile.customer_id == "user-1"
    assert profile.access_levels[0].expires_at == datetime(2030, 1, 1, tzinfo=timezone.utc)


def test_billing_http_error_is_upstream_unavailable(transport) -> None:
    transport.queue(_http_error("https://api.adapty.io", 404))

    with pytest.raises(UpstreamUnavailable) as exc:
        _billing_client().fetch_profile("user-1")

    assert exc.value.detail == {"provider": "adapty", "http_status": 404}


def test_billing_unreachable_is_upstream_unavailable(transport) -> None:
    transport.queue(urllib_error.URLError("connection refused"))

    with pytest.raises(UpstreamUnavailable, match="adapty is unreachable"):
        _billing_client().fetch_profile("user-1")


def test_billing_timeout_is_upstream_unavailable(transport) -> None:
    transport.queue(TimeoutError("timed out"))

    with pytest.raises(UpstreamUnavailable):
        _billing_client().fetch_profile("user-1")


@pytest.mark.parametrize("raw", [b"<html>", b"[1, 2]"])
def test_billing_unexpected_body_is_upstream_unavailable(transport, raw) -> None:
    transport.queue(raw)

    with pytest.raises(UpstreamUnavailable):
        _billing_client().fetch_profile("user-1")


def test_billing_truncated_read_is_upstream_unavailable(transport) -> None:
    transport.queue(_FakeResponse(http.client.IncompleteRead(b'{"data"', 120)))

    with pytest.raises(UpstreamUnavailable, match="adapty is unreachable"):
        _billing_client().fetch_profile("user-1")


def test_billing_bad_status_line_is_upstream_unavailable(transport) -> None:
    transport.queue(http.client.BadStatusLine("garbage"))

    with pytest.raises(UpstreamUnavailable, match="adapty is unreachable"):
        _billing_client().fetch_profile("user-1")


def test_malformed_base_url_is_upstream_unavailable(transport) -> None:
    client = AdaptyBillingClient(api_key="secret_live", base_url="not a url", timeout=3.0)

    with pytest.raises(UpstreamUnavailable):
        client.fetch_profile("user-1")

    assert transport.requests == []


def test_billing_empty_body_yields_empty_profile(transport) -> None:
    transport.queue(b"")

    profile = _billing_client().fetch_profile("user-1")

    assert profile.access_levels == ()


def test_dispatch_request(transport) -> None:
    transport.queue(b'{"id": "abc", "external_id": null}')
    payload = {"app_id": "app-1", "include_aliases": {"external_id": ["u1"]}}

    result = _dispatch_client().send(payload)

    request = transport.requests[0]
    assert request["url"] == "https://api.onesignal.com/notifications"
    assert request["method"] == "POST"
    assert request["headers"]["authorization"] == "Key os-key"
    assert request["headers"]["content-type"] == "application/json"
    assert request["body"] == payload
    assert result == {"id": "abc", "external_id": None}


def test_dispatch_rejection_is_upstream_unavailable(transport) -> None:
    transport.queue(_http_error("https://api.onesignal.com/notifications", 400))

    with pytest.raises(UpstreamUnavailable) as exc:
        _dispatch_client().send({"app_id": "app-1"})

    assert exc.value.detail["provider"] == "onesignal"
    assert exc.value.detail["http_status"] == 400
