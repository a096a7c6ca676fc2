"""Per-event task scheduling for the inbound relay."""

from __future__ import annotations

import asyncio
import logging

from wabridge.models import InboundMessage
from wabridge.session.protocol import MessageHandler

logger = logging.getLogger(__name__)


class RelayWorkerPool:
    """Runs each inbound message in its own task.

    Messages from different senders are relayed concurrently. Messages from
    the same sender wait on a FIFO lock so their webhook calls keep arrival
    order. Locks are dropped once a sender has nothing in flight.
    """

    def __init__(self, relay: MessageHandler) -> None:
        self._relay = relay
        self._tasks: set[asyncio.Task[None]] = set()
        self._sender_locks: dict[str, asyncio.Lock] = {}
        self._sender_pending: dict[str, int] = {}

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def handle(self, message: InboundMessage) -> None:
        self.submit(message)

    def submit(self, message: InboundMessage) -> asyncio.Task[None] | None:
        """Schedule ``message`` and return immediately; None if it is not relayable."""
        if not message.is_relayable:
            return None

        sender = message.sender
        lock = self._sender_locks.setdefault(sender, asyncio.Lock())
        self._sender_pending[sender] = self._sender_pending.get(sender, 0) + 1

        task = asyncio.create_task(self._run(message, lock))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def join(self) -> None:
        """Wait until every scheduled relay has finished."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _run(self, message: InboundMessage, lock: asyncio.Lock) -> None:
        try:
            async with lock:
                await self._relay.handle(message)
        except Exception:
            logger.exception("Unhandled error relaying message from %s", message.sender)
        finally:
            self._release(message.sender)

    def _release(self, sender: str) -> None:
        remaining = self._sender_pending.get(sender, 1) - 1
        if remaining <= 0:
            self._sender_pending.pop(sender, None)
            self._sender_locks.pop(sender, None)
        else:
            self._sender_pending[sender] = remaining
