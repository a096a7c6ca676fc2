"""Inbound relay — forwards each chat message to the webhook and relays the reply.

Per message:
1. Drop self-originated messages and empty bodies
2. Notify the webhook
3. On failure, substitute the fallback reply
4. Dispatch the reply if there is one
"""

from __future__ import annotations

import logging

from wabridge.config import DEFAULT_FALLBACK_REPLY
from wabridge.models import InboundMessage
from wabridge.relay.dispatcher import ReplyDispatcher
from wabridge.webhook.client import WebhookClient, WebhookError

logger = logging.getLogger(__name__)


class InboundRelay:
    """Handles one inbound message at a time; holds no per-message state."""

    def __init__(
        self,
        webhook: WebhookClient,
        dispatcher: ReplyDispatcher,
        fallback_reply: str = DEFAULT_FALLBACK_REPLY,
    ) -> None:
        self._webhook = webhook
        self._dispatcher = dispatcher
        self._fallback_reply = fallback_reply

    async def handle(self, message: InboundMessage) -> None:
        if not message.is_relayable:
            return

        logger.info("Message received from %s: %s", message.sender, message.text)

        try:
            reply = await self._webhook.notify(message.sender, message.text)
        except WebhookError as exc:
            logger.warning("Webhook failed for message from %s: %s", message.sender, exc)
            reply = self._fallback_reply

        if not reply:
            return

        await self._dispatcher.reply(message.sender, reply)
