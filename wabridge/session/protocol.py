"""Structural interface of the messaging-protocol client.

The client owns the connection, encryption and device-session store. The
bridge only needs the narrow capability set below; any object providing it
can be plugged in.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Protocol, runtime_checkable

from wabridge.models import InboundMessage, PairingEvent


@runtime_checkable
class MessageHandler(Protocol):
    """Anything that can take one inbound message."""

    async def handle(self, message: InboundMessage) -> None: ...


@runtime_checkable
class ProtocolClient(Protocol):
    async def has_identity(self) -> bool:
        """Return True if the session store already holds a device identity."""
        ...

    def pairing_events(self) -> AsyncIterator[PairingEvent]:
        """Open the pairing stream; it must be requested before ``connect``."""
        ...

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def send_text(self, recipient: str, text: str) -> None: ...

    def subscribe(self, handler: MessageHandler) -> None:
        """Register the handler invoked once per inbound message."""
        ...


ClientFactory = Callable[[str], ProtocolClient]
