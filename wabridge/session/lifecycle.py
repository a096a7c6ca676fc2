"""Session lifecycle — first-time pairing vs. resuming a stored session.

State machine with two states, entered once at process start:

- UNPAIRED, no stored identity: request the pairing stream, connect, then
  render every issued code until the stream ends. Stream end means ACTIVE.
- UNPAIRED, stored identity: connect directly. ACTIVE.

Every failure on either branch is fatal and raised as ``StartupError``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from wabridge.models import PairingEventKind, SessionState
from wabridge.session.protocol import ProtocolClient
from wabridge.session.qr import render_pairing_code

logger = logging.getLogger(__name__)


class StartupError(Exception):
    """Raised when the session cannot be established; the process must stop."""


class SessionLifecycleManager:
    """Drives the client from UNPAIRED to ACTIVE."""

    def __init__(
        self,
        client: ProtocolClient,
        render_code: Callable[[str], None] = render_pairing_code,
    ) -> None:
        self._client = client
        self._render_code = render_code
        self._state = SessionState.UNPAIRED
        self._started = False
        self._connected = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def connected(self) -> bool:
        """True once ``connect`` has succeeded, even if pairing later failed."""
        return self._connected

    async def start(self) -> SessionState:
        if self._started:
            raise RuntimeError("Session lifecycle already started")
        self._started = True

        try:
            paired = await self._client.has_identity()
        except Exception as exc:
            raise StartupError(f"Failed to look up device identity: {exc}") from exc

        if paired:
            await self._resume()
        else:
            await self._pair()

        self._state = SessionState.ACTIVE
        logger.info("Logged in, waiting for incoming messages")
        return self._state

    async def _resume(self) -> None:
        logger.info("Session found, reconnecting")
        try:
            await self._client.connect()
        except Exception as exc:
            raise StartupError(f"Failed to connect: {exc}") from exc
        self._connected = True

    async def _pair(self) -> None:
        logger.info("No stored session, starting pairing")
        try:
            events = self._client.pairing_events()
        except Exception as exc:
            raise StartupError(f"Failed to open pairing stream: {exc}") from exc

        try:
            await self._client.connect()
        except Exception as exc:
            raise StartupError(f"Failed to connect: {exc}") from exc
        self._connected = True

        try:
            async for event in events:
                if event.kind == PairingEventKind.CODE and event.code:
                    self._render_code(event.code)
                else:
                    logger.info("Pairing event: %s", event.name)
        except Exception as exc:
            raise StartupError(f"Pairing failed: {exc}") from exc
