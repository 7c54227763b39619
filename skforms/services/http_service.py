"""Retrying wrapper for outbound HTTP calls such as the Resend API."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


def retry_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    response: httpx.Response | None = None,
) -> float:
    """Seconds to wait after the given (zero-based) attempt.

    A numeric ``Retry-After`` header wins, capped at ``max_delay``. Otherwise
    the delay doubles per attempt with up to 50% jitter added.
    """
    if response is not None:
        retry_after = response.headers.get("retry-after", "").strip()
        if retry_after.isdigit():
            return min(max_delay, float(retry_after))
    delay = min(max_delay, base_delay * (2**attempt))
    return delay + random.uniform(0, delay / 2) if delay else 0.0


async def request_with_retries(
    request_fn: Callable[[], Awaitable[httpx.Response]],
    *,
    label: str = "HTTP request",
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    retry_statuses: frozenset[int] | set[int] | None = None,
) -> httpx.Response:
    """Call ``request_fn`` until it succeeds or attempts run out.

    Transport errors on the final attempt propagate. A retryable status on
    the final attempt is handed back so the caller can report it.
    """
    statuses = retry_statuses or RETRYABLE_STATUSES
    attempt = 0
    while True:
        attempt += 1
        final = attempt >= max_attempts
        try:
            response = await request_fn()
        except httpx.RequestError as exc:
            if final:
                raise
            logger.warning(
                "%s failed on attempt %s/%s (%s), retrying",
                label,
                attempt,
                max_attempts,
                exc.__class__.__name__,
            )
            delay = retry_delay(attempt - 1, base_delay, max_delay)
        else:
            if final or response.status_code not in statuses:
                return response
            logger.warning(
                "%s returned %s on attempt %s/%s, retrying",
                label,
                response.status_code,
                attempt,
                max_attempts,
            )
            delay = retry_delay(attempt - 1, base_delay, max_delay, response)

        if delay:
            await asyncio.sleep(delay)
