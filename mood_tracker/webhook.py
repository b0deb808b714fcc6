"""Relay accepted submissions to the configured automation webhook."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from .config import DEFAULT_WEBHOOK_TIMEOUT
from .models import Submission

logger = logging.getLogger("mood_tracker.webhook")

# Make.com shorthand: <token>@hook.<region>.<domain>
_HOOK_SHORTHAND = re.compile(r"^(?P<token>[^@/\s]+)@(?P<host>hook\.[^.@/\s]+\.[^@/\s]+)$")


class WebhookError(RuntimeError):
    """Base class for failures while forwarding a submission."""


class WebhookConfigurationError(WebhookError):
    """Raised when no usable webhook destination is configured."""


class WebhookDeliveryError(WebhookError):
    """Raised when the webhook could not be reached or rejected the payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


@dataclass(frozen=True)
class WebhookDelivery:
    """Outcome of a successful webhook call."""

    url: str
    status_code: int


def normalize_webhook_url(value: str) -> str:
    """Return a fully qualified URL for a configured webhook destination.

    Values that already carry an ``http://`` or ``https://`` scheme are
    returned unchanged. The ``token@hook.region.domain`` shorthand becomes
    ``https://hook.region.domain/token``; anything else gains ``https://``.
    """

    cleaned = value.strip()
    if cleaned.startswith("http://") or cleaned.startswith("https://"):
        return cleaned

    match = _HOOK_SHORTHAND.match(cleaned)
    if match:
        return f"https://{match.group('host')}/{match.group('token')}"
    return "https://" + cleaned


def build_webhook_payload(submission: Submission) -> Dict[str, str]:
    return {
        "email": submission.email,
        "horoscope_sign": submission.horoscope_sign,
        "mood": submission.mood,
    }


class WebhookForwarder:
    """POST submissions as JSON to a single webhook destination."""

    def __init__(
        self,
        webhook_url: Optional[str],
        *,
        timeout: float = DEFAULT_WEBHOOK_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._webhook_url = webhook_url.strip() if webhook_url else None
        self._timeout = timeout
        self._transport = transport

    async def forward(self, submission: Submission) -> WebhookDelivery:
        if not self._webhook_url:
            raise WebhookConfigurationError("No webhook URL configured")

        url = normalize_webhook_url(self._webhook_url)
        payload = build_webhook_payload(submission)
        logger.info("Forwarding submission %s to %s", submission.id, url)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.InvalidURL as exc:
            raise WebhookConfigurationError(f"Invalid webhook URL {url!r}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise WebhookDeliveryError(f"Webhook request timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise WebhookDeliveryError(f"Failed to contact webhook: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise WebhookDeliveryError(
                f"Webhook responded with {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        return WebhookDelivery(url=url, status_code=response.status_code)


__all__ = [
    "WebhookConfigurationError",
    "WebhookDelivery",
    "WebhookDeliveryError",
    "WebhookError",
    "WebhookForwarder",
    "build_webhook_payload",
    "normalize_webhook_url",
]
