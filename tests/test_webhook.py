from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from mood_tracker.models import Submission
from mood_tracker.webhook import (
    WebhookConfigurationError,
    WebhookDeliveryError,
    WebhookForwarder,
    build_webhook_payload,
    normalize_webhook_url,
)


def _submission() -> Submission:
    return Submission(
        id=7,
        email="comet@example.com",
        horoscope_sign="virgo",
        mood="Organised and calm",
        created_at=datetime(2024, 9, 1, tzinfo=timezone.utc),
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("abc123@hook.eu1.make.com", "https://hook.eu1.make.com/abc123"),
        ("tok-9@hook.us2.example.io", "https://hook.us2.example.io/tok-9"),
        ("example.com/hook", "https://example.com/hook"),
        ("https://hook.eu1.make.com/abc123", "https://hook.eu1.make.com/abc123"),
        ("http://localhost:9000/hook", "http://localhost:9000/hook"),
        ("  abc123@hook.eu1.make.com\n", "https://hook.eu1.make.com/abc123"),
    ],
)
def test_normalize_webhook_url(raw: str, expected: str) -> None:
    assert normalize_webhook_url(raw) == expected


def test_payload_uses_snake_case_sign() -> None:
    assert build_webhook_payload(_submission()) == {
        "email": "comet@example.com",
        "horoscope_sign": "virgo",
        "mood": "Organised and calm",
    }


def test_forward_posts_json_to_normalised_url() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text="Accepted")

    forwarder = WebhookForwarder("abc123@hook.eu1.make.com", transport=httpx.MockTransport(handler))
    delivery = asyncio.run(forwarder.forward(_submission()))

    assert delivery.status_code == 200
    assert delivery.url == "https://hook.eu1.make.com/abc123"
    assert len(captured) == 1
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://hook.eu1.make.com/abc123"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == build_webhook_payload(_submission())


def test_forward_accepts_any_2xx_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(204))
    forwarder = WebhookForwarder("https://example.com/hook", transport=transport)

    assert asyncio.run(forwarder.forward(_submission())).status_code == 204


@pytest.mark.parametrize("url", [None, "", "   "])
def test_missing_destination_fails_without_network_call(url: str | None) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    forwarder = WebhookForwarder(url, transport=httpx.MockTransport(handler))

    with pytest.raises(WebhookConfigurationError):
        asyncio.run(forwarder.forward(_submission()))
    assert calls == []


def test_non_2xx_response_raises_delivery_error_with_status() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    forwarder = WebhookForwarder("https://example.com/hook", transport=transport)

    with pytest.raises(WebhookDeliveryError) as excinfo:
        asyncio.run(forwarder.forward(_submission()))

    assert excinfo.value.status_code == 404
    assert excinfo.value.reason == "Not Found"


def test_network_error_raises_delivery_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    forwarder = WebhookForwarder("https://example.com/hook", transport=httpx.MockTransport(handler))

    with pytest.raises(WebhookDeliveryError) as excinfo:
        asyncio.run(forwarder.forward(_submission()))

    assert excinfo.value.status_code is None


def test_timeout_raises_delivery_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    forwarder = WebhookForwarder(
        "https://example.com/hook",
        timeout=10.0,
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(WebhookDeliveryError, match="timed out after 10.0s"):
        asyncio.run(forwarder.forward(_submission()))


def test_default_timeout_reaches_http_client() -> None:
    timeouts: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        timeouts.append(request.extensions["timeout"])
        return httpx.Response(200)

    forwarder = WebhookForwarder("https://example.com/hook", transport=httpx.MockTransport(handler))
    asyncio.run(forwarder.forward(_submission()))

    assert timeouts == [{"connect": 10.0, "read": 10.0, "write": 10.0, "pool": 10.0}]
