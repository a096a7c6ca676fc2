"""Shared test fixtures for wabridge."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from wabridge.config import RelayConfig
from wabridge.models import InboundMessage, PairingEvent
from wabridge.session.protocol import MessageHandler

SENDER = "+1555@x"


class FakeProtocolClient:
    """In-memory protocol client recording every call in ``calls``."""

    def __init__(
        self,
        has_identity: bool = True,
        pairing: list[PairingEvent] | None = None,
        connect_error: Exception | None = None,
        send_error: Exception | None = None,
        store_path: str = "",
        pairing_error: Exception | None = None,
        hold_pairing: bool = False,
    ) -> None:
        self.store_path = store_path
        self._has_identity = has_identity
        self._pairing = pairing or []
        self._connect_error = connect_error
        self._send_error = send_error
        self._pairing_error = pairing_error
        self._hold_pairing = hold_pairing
        self.calls: list[str] = []
        self.sent: list[tuple[str, str]] = []
        self.handlers: list[MessageHandler] = []
        self.connected = asyncio.Event()

    async def has_identity(self) -> bool:
        self.calls.append("has_identity")
        return self._has_identity

    def pairing_events(self) -> AsyncIterator[PairingEvent]:
        self.calls.append("pairing_events")
        return self._iter_pairing()

    async def _iter_pairing(self) -> AsyncIterator[PairingEvent]:
        for event in self._pairing:
            self.calls.append(f"pairing:{event.kind.value}")
            yield event
        if self._pairing_error is not None:
            raise self._pairing_error
        if self._hold_pairing:
            # the stream stays open until the scan completes, which never happens here
            await asyncio.Event().wait()

    async def connect(self) -> None:
        self.calls.append("connect")
        if self._connect_error is not None:
            raise self._connect_error
        self.connected.set()

    async def disconnect(self) -> None:
        self.calls.append("disconnect")

    async def send_text(self, recipient: str, text: str) -> None:
        self.calls.append("send_text")
        if self._send_error is not None:
            raise self._send_error
        self.sent.append((recipient, text))

    def subscribe(self, handler: MessageHandler) -> None:
        self.handlers.append(handler)

    async def deliver(self, message: InboundMessage) -> None:
        for handler in self.handlers:
            await handler.handle(message)


def fake_client_factory(store_path: str) -> FakeProtocolClient:
    """Client factory loadable by import path from the CLI."""
    return FakeProtocolClient(store_path=store_path)


def broken_client_factory(store_path: str) -> FakeProtocolClient:
    raise OSError(f"cannot open {store_path}")


@pytest.fixture
def fake_client() -> FakeProtocolClient:
    return FakeProtocolClient()


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(webhook_url="http://webhook.test/hook", request_timeout=5.0)


# --- Factory functions for test data ---


def make_inbound_message(**kwargs: Any) -> InboundMessage:
    """Factory for InboundMessage with sensible defaults."""
    defaults: dict[str, Any] = {
        "sender": SENDER,
        "text": "hello",
        "from_me": False,
    }
    defaults.update(kwargs)
    return InboundMessage(**defaults)


def make_http_response(status_code: int = 200, content: bytes = b"{}") -> MagicMock:
    """Factory for a response object as returned by httpx.AsyncClient.post."""
    return MagicMock(status_code=status_code, content=content)


def mock_async_client(mock_client_cls: MagicMock, **post_kwargs: Any) -> AsyncMock:
    """Make a patched httpx.AsyncClient class yield an AsyncMock usable in ``async with``."""
    mock_client = AsyncMock()
    mock_client.post = AsyncMock(**post_kwargs)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client
