"""Pydantic models for Twitch EventSub webhook payloads and decoded notifications."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict


class EventSubTransport(BaseModel):
    """Transport section of an EventSub subscription."""

    model_config = ConfigDict(extra="allow")

    method: str | None = None
    callback: str | None = None


class EventSubSubscription(BaseModel):
    """Subscription section of an EventSub notification."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str = ""
    version: str | None = None
    status: str | None = None
    condition: dict[str, Any] = {}
    transport: EventSubTransport | None = None
    created_at: str | None = None


class StreamOfflineEvent(BaseModel):
    """Event payload for the stream.offline subscription type."""

    model_config = ConfigDict(extra="allow")

    broadcaster_user_id: str | None = None
    broadcaster_user_login: str | None = None
    broadcaster_user_name: str


class StreamOnlineEvent(StreamOfflineEvent):
    """Event payload for the stream.online subscription type."""

    id: str | None = None
    type: str | None = None
    started_at: str | None = None


class EventSubNotification(BaseModel):
    """Top-level body of an EventSub webhook request."""

    model_config = ConfigDict(extra="allow")

    challenge: str | None = None
    subscription: EventSubSubscription | None = None
    event: dict[str, Any] | None = None


@dataclass(frozen=True)
class ChallengeRequest:
    """Callback verification request that must be answered with the challenge."""

    challenge: str


@dataclass(frozen=True)
class EntityOnlineEvent:
    """The entity has gone live."""

    entity: str


@dataclass(frozen=True)
class EntityOfflineEvent:
    """The entity has stopped streaming."""

    entity: str


@dataclass(frozen=True)
class SubscriptionRevoked:
    """The provider revoked one of our subscriptions."""

    subscription_type: str
    status: str | None


@dataclass(frozen=True)
class UnrecognizedType:
    """A notification for a subscription type we do not handle."""

    type_name: str


DecodedNotification = ChallengeRequest | EntityOnlineEvent | EntityOfflineEvent | SubscriptionRevoked | UnrecognizedType
