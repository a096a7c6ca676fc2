"""Relay bridge assembly."""

from __future__ import annotations

import asyncio
import importlib
import logging
from collections.abc import Callable

from wabridge.config import RelayConfig
from wabridge.relay.dispatcher import ReplyDispatcher
from wabridge.relay.handler import InboundRelay
from wabridge.relay.worker import RelayWorkerPool
from wabridge.session.lifecycle import SessionLifecycleManager, StartupError
from wabridge.session.protocol import ClientFactory, ProtocolClient
from wabridge.session.qr import render_pairing_code
from wabridge.shutdown import ShutdownCoordinator
from wabridge.webhook.client import WebhookClient

logger = logging.getLogger(__name__)


def load_client_factory(import_path: str) -> ClientFactory:
    """Resolve a ``"package.module:attr"`` path to a protocol client factory."""
    module_name, sep, attr = import_path.partition(":")
    if not sep or not module_name or not attr:
        raise StartupError(
            f"Client factory must look like 'package.module:factory', got {import_path!r}",
        )
    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise StartupError(f"Cannot load client factory {import_path!r}: {exc}") from exc
    if not callable(factory):
        raise StartupError(f"Client factory {import_path!r} is not callable")
    return factory  # type: ignore[no-any-return]


def create_client(config: RelayConfig, factory: ClientFactory) -> ProtocolClient:
    """Open the session store at ``config.store_path`` through the factory."""
    try:
        return factory(config.store_path)
    except Exception as exc:
        raise StartupError(
            f"Failed to open session store {config.store_path!r}: {exc}",
        ) from exc


class RelayBridge:
    """Wires the webhook relay to a protocol client and runs it until shutdown."""

    def __init__(
        self,
        config: RelayConfig,
        client: ProtocolClient,
        render_code: Callable[[str], None] = render_pairing_code,
    ) -> None:
        self.config = config
        self.client = client
        self.webhook = WebhookClient(config.webhook_url, timeout=config.request_timeout)
        self.dispatcher = ReplyDispatcher(client)
        self.relay = InboundRelay(
            self.webhook, self.dispatcher, fallback_reply=config.fallback_reply,
        )
        self.workers = RelayWorkerPool(self.relay)
        self.lifecycle = SessionLifecycleManager(client, render_code=render_code)
        self.shutdown = ShutdownCoordinator(client)

    async def run(self, install_signal_handlers: bool = True) -> None:
        """Start the session, relay messages, and return after a clean disconnect.

        A shutdown request during pairing or connecting abandons startup and
        disconnects. Raises StartupError if the session cannot be established.
        """
        self.client.subscribe(self.workers)
        logger.info("Relaying messages to %s", self.config.webhook_url)

        if install_signal_handlers:
            self.shutdown.install_signal_handlers()
        try:
            await self._start_session()
            await self.shutdown.wait()
        finally:
            if install_signal_handlers:
                self.shutdown.remove_signal_handlers()

    async def _start_session(self) -> None:
        start = asyncio.create_task(self.lifecycle.start())
        stop = asyncio.create_task(self.shutdown.requested())
        try:
            await asyncio.wait({start, stop}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            start.cancel()
            raise
        finally:
            stop.cancel()

        if not start.done():
            logger.info("Shutdown requested before the session became active")
            start.cancel()
            await asyncio.gather(start, return_exceptions=True)
            return

        try:
            start.result()
        except StartupError:
            # pairing can fail after the connection is already open
            if self.lifecycle.connected:
                await self.shutdown.disconnect()
            raise
