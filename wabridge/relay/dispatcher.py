"""Reply dispatcher — sends webhook replies back over the session."""

from __future__ import annotations

import logging

from wabridge.session.protocol import ProtocolClient

logger = logging.getLogger(__name__)


class ReplyDispatcher:
    def __init__(self, client: ProtocolClient) -> None:
        self._client = client

    async def reply(self, recipient: str, text: str) -> bool:
        """Send ``text`` to ``recipient``; failures are logged, never retried or raised."""
        try:
            await self._client.send_text(recipient, text)
        except Exception:
            logger.exception("Failed to send reply to %s", recipient)
            return False
        logger.info("Reply sent to %s", recipient)
        return True
