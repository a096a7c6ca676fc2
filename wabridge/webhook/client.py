"""Webhook client — notifies the external webhook and parses its optional reply.

One POST per inbound message with a bounded timeout. No retries: a failed
call surfaces as a ``WebhookError`` subclass and the caller decides what
the sender sees.
"""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from wabridge.config import DEFAULT_REQUEST_TIMEOUT
from wabridge.models import WebhookRequestPayload, WebhookResponsePayload

logger = logging.getLogger(__name__)


class WebhookError(Exception):
    """Base class for every way a webhook call can fail."""


class WebhookTransportError(WebhookError):
    """Raised when the request could not be sent or timed out."""


class WebhookStatusError(WebhookError):
    """Raised when the webhook answers with anything other than 200."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Webhook returned non-200 status code: {status_code}")


class WebhookBodyError(WebhookError):
    """Raised when the response body cannot be read or decoded."""


class WebhookPayloadError(WebhookError):
    """Raised when the response body is not JSON of the expected shape."""


class WebhookClient:
    """Posts ``{"sender", "message"}`` to a fixed URL and returns the reply text."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout

    @property
    def webhook_url(self) -> str:
        return self._webhook_url

    async def notify(self, sender: str, message: str) -> str:
        """Send one notification; return the reply, or "" when there is none."""
        payload = WebhookRequestPayload(sender=sender, message=message)
        headers = {"Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    self._webhook_url,
                    json=payload.model_dump(),
                    headers=headers,
                    timeout=self._timeout,
                )
        except httpx.DecodingError as exc:
            raise WebhookBodyError(f"Error decoding webhook response: {exc}") from exc
        except httpx.RequestError as exc:
            raise WebhookTransportError(
                f"Error sending request to webhook: {exc!r}",
            ) from exc

        if resp.status_code != 200:
            raise WebhookStatusError(resp.status_code)

        try:
            data = json.loads(resp.content)
        except UnicodeDecodeError as exc:
            raise WebhookBodyError(f"Webhook response is not valid text: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise WebhookPayloadError(f"Webhook response is not JSON: {exc}") from exc

        try:
            body = WebhookResponsePayload.model_validate(data)
        except ValidationError as exc:
            raise WebhookPayloadError(
                f"Unexpected webhook response shape: {exc.error_count()} error(s)",
            ) from exc

        logger.debug("Webhook accepted message from %s", sender)
        return body.reply
