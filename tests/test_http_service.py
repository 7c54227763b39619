"""Tests for HTTP retry helper."""

import httpx
import pytest

from skforms.services import http_service
from skforms.services.http_service import request_with_retries


def _scripted(outcomes):
    """Request function that replays responses or raises exceptions in order."""
    calls = {"count": 0}

    async def request_fn():
        calls["count"] += 1
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return request_fn, calls


@pytest.mark.asyncio
async def test_request_with_retries_retries_on_status():
    req = httpx.Request("POST", "https://api.resend.com/emails")
    request_fn, calls = _scripted(
        [httpx.Response(503, request=req), httpx.Response(200, json={"id": "m"}, request=req)]
    )

    response = await request_with_retries(request_fn, max_attempts=3, base_delay=0, max_delay=0)

    assert calls["count"] == 2
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_request_with_retries_returns_last_retryable_response():
    req = httpx.Request("POST", "https://api.resend.com/emails")
    request_fn, calls = _scripted([httpx.Response(429, request=req), httpx.Response(429, request=req)])

    response = await request_with_retries(request_fn, max_attempts=2, base_delay=0, max_delay=0)

    assert calls["count"] == 2
    assert response.status_code == 429


@pytest.mark.asyncio
async def test_request_with_retries_does_not_retry_client_errors():
    req = httpx.Request("POST", "https://api.resend.com/emails")
    request_fn, calls = _scripted([httpx.Response(422, request=req)])

    response = await request_with_retries(request_fn, max_attempts=3, base_delay=0, max_delay=0)

    assert calls["count"] == 1
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_request_with_retries_retries_on_request_error():
    req = httpx.Request("POST", "https://api.resend.com/emails")
    request_fn, calls = _scripted(
        [httpx.ConnectError("boom", request=req), httpx.Response(200, request=req)]
    )

    response = await request_with_retries(request_fn, max_attempts=2, base_delay=0, max_delay=0)

    assert calls["count"] == 2
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_request_with_retries_raises_after_max_attempts():
    req = httpx.Request("POST", "https://api.resend.com/emails")
    request_fn, calls = _scripted(
        [httpx.ConnectError("boom", request=req), httpx.ReadTimeout("slow", request=req)]
    )

    with pytest.raises(httpx.ReadTimeout):
        await request_with_retries(request_fn, max_attempts=2, base_delay=0, max_delay=0)

    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_request_with_retries_honors_retry_after(monkeypatch):
    slept = []

    async def fake_sleep(seconds):
        slept.append(seconds)

    monkeypatch.setattr(http_service.asyncio, "sleep", fake_sleep)
    req = httpx.Request("POST", "https://api.resend.com/emails")
    request_fn, calls = _scripted(
        [
            httpx.Response(429, headers={"Retry-After": "2"}, request=req),
            httpx.Response(429, headers={"Retry-After": "60"}, request=req),
            httpx.Response(200, request=req),
        ]
    )

    response = await request_with_retries(request_fn, max_attempts=3, base_delay=0.5, max_delay=4.0)

    assert response.status_code == 200
    assert slept == [2.0, 4.0]


def test_retry_delay_backs_off_with_jitter(monkeypatch):
    monkeypatch.setattr(http_service.random, "uniform", lambda low, high: high)

    assert http_service.retry_delay(0, 0.5, 4.0) == 0.75
    assert http_service.retry_delay(2, 0.5, 4.0) == 3.0
    assert http_service.retry_delay(5, 0.5, 4.0) == 6.0
    assert http_service.retry_delay(3, 0, 0) == 0.0
