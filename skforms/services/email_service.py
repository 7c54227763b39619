"""Outbound email transport (Resend).

Callers get an ``EmailSendResult`` back for every attempt; an unconfigured
sender or a provider error is reported as ``success=False``, never raised.
Transport exceptions that survive the retries are also folded into the result.
"""

from __future__ import annotations

import html as html_module
import logging
import re
from dataclasses import dataclass

import httpx

from skforms.core.config import settings
from skforms.services.http_service import request_with_retries

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
RESEND_MAX_ATTEMPTS = 3
RESEND_RETRY_BASE_DELAY = 0.5
RESEND_RETRY_MAX_DELAY = 4.0
RESEND_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class EmailSendResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


def html_to_text(content: str) -> str:
    """Convert HTML into readable text for the plain-text part."""
    text = re.sub(r"<(script|style)[^>]*>.*?</\1>", "", content, flags=re.DOTALL | re.I)
    text = re.sub(r"<br\s*/?>|</(p|div|h[1-6]|li|tr)>", "\n", text, flags=re.I)
    text = re.sub(r"<[^>]+>", " ", text)
    text = html_module.unescape(text)
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def sender_configured() -> bool:
    return settings.email_configured


def _from_header() -> str:
    from_email = settings.EMAIL_FROM.strip()
    if settings.EMAIL_FROM_NAME:
        return f"{settings.EMAIL_FROM_NAME} <{from_email}>"
    return from_email


def _error_detail(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        detail = data.get("message") or data.get("error")
        if isinstance(detail, str):
            return detail
    return None


async def _send_resend_email(
    *,
    to_email: str,
    subject: str,
    html: str,
    text: str | None,
    idempotency_key: str | None,
) -> EmailSendResult:
    payload: dict[str, object] = {
        "from": _from_header(),
        "to": [to_email],
        "subject": subject,
        "html": html,
    }
    if text:
        payload["text"] = text

    headers = {
        "Authorization": f"Bearer {settings.RESEND_API_KEY}",
        "Content-Type": "application/json",
    }
    if idempotency_key:
        headers["Idempotency-Key"] = idempotency_key

    async with httpx.AsyncClient(timeout=RESEND_TIMEOUT_SECONDS) as client:

        async def request_fn() -> httpx.Response:
            return await client.post(RESEND_SEND_URL, headers=headers, json=payload)

        response = await request_with_retries(
            request_fn,
            max_attempts=RESEND_MAX_ATTEMPTS,
            base_delay=RESEND_RETRY_BASE_DELAY,
            max_delay=RESEND_RETRY_MAX_DELAY,
            label="Resend send",
        )

    if 200 <= response.status_code < 300:
        try:
            data = response.json()
        except ValueError:
            data = None
        message_id = data.get("id") if isinstance(data, dict) else None
        if isinstance(message_id, str) and message_id:
            return EmailSendResult(success=True, message_id=message_id)
        return EmailSendResult(success=False, error="Resend API returned success without message id")

    # Resend answers 409 when the idempotency key was already used: the message exists.
    if response.status_code == 409:
        return EmailSendResult(success=True)

    detail = _error_detail(response)
    if detail:
        return EmailSendResult(
            success=False, error=f"Resend API error: {response.status_code} ({detail})"
        )
    return EmailSendResult(success=False, error=f"Resend API error: {response.status_code}")


async def send_email(
    *,
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
    idempotency_key: str | None = None,
) -> EmailSendResult:
    """Send one email. Returns a result; does not raise on delivery failure."""
    if not sender_configured():
        return EmailSendResult(
            success=False,
            error="Email sender not configured (missing RESEND_API_KEY or EMAIL_FROM)",
        )

    try:
        result = await _send_resend_email(
            to_email=to,
            subject=subject,
            html=html,
            text=text if text is not None else html_to_text(html),
            idempotency_key=idempotency_key,
        )
    except httpx.HTTPError as exc:
        logger.warning("Email transport error", exc_info=True)
        return EmailSendResult(success=False, error=f"Email transport error: {exc.__class__.__name__}")

    if result.success:
        logger.info("Email sent (message_id=%s)", result.message_id)
    else:
        logger.warning("Email send failed: %s", result.error)
    return result
