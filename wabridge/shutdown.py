"""Shutdown coordinator — waits for SIGINT/SIGTERM and disconnects once."""

from __future__ import annotations

import asyncio
import logging
import signal

from wabridge.session.protocol import ProtocolClient

logger = logging.getLogger(__name__)

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownCoordinator:
    def __init__(self, client: ProtocolClient) -> None:
        self._client = client
        self._stop = asyncio.Event()
        self._disconnected = False

    def trigger(self) -> None:
        """Request shutdown; safe to call any number of times."""
        self._stop.set()

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _SIGNALS:
            loop.add_signal_handler(sig, self._on_signal, sig)

    def remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _SIGNALS:
            loop.remove_signal_handler(sig)

    async def requested(self) -> None:
        """Block until shutdown is requested."""
        await self._stop.wait()

    async def wait(self) -> None:
        """Block until shutdown is requested, then disconnect the client."""
        await self._stop.wait()
        await self.disconnect()

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.info("Received %s, shutting down", sig.name)
        self.trigger()

    async def disconnect(self) -> None:
        """Disconnect the client unless that already happened."""
        if self._disconnected:
            return
        self._disconnected = True
        try:
            await self._client.disconnect()
        except Exception:
            logger.exception("Error while disconnecting")
        else:
            logger.info("Disconnected")
