"""Decodes verified EventSub webhook bodies into typed notifications."""

import structlog
from pydantic import ValidationError

from stream_status_manager.notifications.exceptions import NotificationDecodeError
from stream_status_manager.notifications.models import (
    ChallengeRequest,
    DecodedNotification,
    EntityOfflineEvent,
    EntityOnlineEvent,
    EventSubNotification,
    StreamOfflineEvent,
    StreamOnlineEvent,
    SubscriptionRevoked,
    UnrecognizedType,
)
from stream_status_manager.utils.constants import MESSAGE_TYPE_REVOCATION, STREAM_OFFLINE_TYPE, STREAM_ONLINE_TYPE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def decode_notification(body: bytes | str, message_type: str | None = None) -> DecodedNotification:
    """Decode a verified notification body.

    A challenge is returned before anything else is looked at. Subscription
    types other than stream.online and stream.offline come back as
    UnrecognizedType instead of raising.

    Args:
        body: The raw request body.
        message_type: Value of the message type header, if the request carried one.

    Raises:
        NotificationDecodeError: If the body is not JSON or does not match the payload schema.
    """
    try:
        notification = EventSubNotification.model_validate_json(body)
    except ValidationError as e:
        raise NotificationDecodeError(f"Invalid notification body: {e}") from e

    if notification.challenge:
        return ChallengeRequest(challenge=notification.challenge)

    subscription_type = notification.subscription.type if notification.subscription else ""

    if message_type == MESSAGE_TYPE_REVOCATION:
        status = notification.subscription.status if notification.subscription else None
        return SubscriptionRevoked(subscription_type=subscription_type, status=status)

    if subscription_type == STREAM_OFFLINE_TYPE:
        try:
            offline_event = StreamOfflineEvent.model_validate(notification.event or {})
        except ValidationError as e:
            raise NotificationDecodeError(f"Invalid {STREAM_OFFLINE_TYPE} event: {e}") from e
        return EntityOfflineEvent(entity=offline_event.broadcaster_user_name)

    if subscription_type == STREAM_ONLINE_TYPE:
        try:
            online_event = StreamOnlineEvent.model_validate(notification.event or {})
        except ValidationError as e:
            raise NotificationDecodeError(f"Invalid {STREAM_ONLINE_TYPE} event: {e}") from e
        return EntityOnlineEvent(entity=online_event.broadcaster_user_name)

    return UnrecognizedType(type_name=subscription_type)
