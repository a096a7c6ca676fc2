"""Shared Pydantic data models for wabridge."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

# --- Enums ---


class SessionState(str, Enum):
    UNPAIRED = "unpaired"
    ACTIVE = "active"


class PairingEventKind(str, Enum):
    CODE = "code"
    OTHER = "other"


# --- Inbound Models ---


class InboundMessage(BaseModel):
    """A chat message delivered by the protocol client."""

    model_config = ConfigDict(frozen=True)

    sender: str
    text: str
    from_me: bool = False

    @property
    def is_relayable(self) -> bool:
        return not self.from_me and self.text != ""


# --- Webhook Models ---


class WebhookRequestPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender: str
    message: str


class WebhookResponsePayload(BaseModel):
    """Webhook reply body; a missing or null ``message`` means no reply."""

    message: str | None = None

    @property
    def reply(self) -> str:
        return self.message or ""


# --- Session Models ---


class PairingEvent(BaseModel):
    """Event from the pairing stream: either a code to scan or a named lifecycle event."""

    model_config = ConfigDict(frozen=True)

    kind: PairingEventKind
    code: str | None = None
    name: str | None = None

    @model_validator(mode="after")
    def _check_variant(self) -> PairingEvent:
        if self.kind == PairingEventKind.CODE and not self.code:
            raise ValueError("code events require a code")
        if self.kind == PairingEventKind.OTHER and not self.name:
            raise ValueError("other events require a name")
        return self

    @classmethod
    def code_issued(cls, code: str) -> PairingEvent:
        return cls(kind=PairingEventKind.CODE, code=code)

    @classmethod
    def other(cls, name: str) -> PairingEvent:
        return cls(kind=PairingEventKind.OTHER, name=name)
