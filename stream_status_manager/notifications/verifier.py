"""Verifies that webhook notifications were signed by the provider."""

import hashlib
import hmac
import re
from collections.abc import Mapping
from datetime import datetime, timezone

import structlog

from stream_status_manager.utils.constants import (
    MESSAGE_ID_HEADER,
    MESSAGE_SIGNATURE_HEADER,
    MESSAGE_TIMESTAMP_HEADER,
    SIGNATURE_PREFIX,
)
from stream_status_manager.utils.helpers import get_header

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_FRACTIONAL_SECONDS_PATTERN = re.compile(r"\.(\d+)")


def compute_signature(secret: str, message_id: str, timestamp: str, body: bytes) -> str:
    """Compute the ``sha256=<hex>`` signature the provider sends for a message."""
    mac = hmac.new(secret.encode("utf-8"), msg=message_id.encode("utf-8") + timestamp.encode("utf-8") + body, digestmod=hashlib.sha256)
    return SIGNATURE_PREFIX + mac.hexdigest()


def parse_message_timestamp(timestamp: str) -> datetime:
    """Parse an RFC 3339 timestamp, which may carry nanosecond precision.

    Raises:
        ValueError: If the timestamp is malformed.
    """
    normalized = timestamp.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    # datetime only understands microseconds.
    normalized = _FRACTIONAL_SECONDS_PATTERN.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), normalized, count=1)
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def verify_notification(
    secret: str,
    headers: Mapping[str, str],
    body: bytes,
    max_age: int | None = None,
    now: datetime | None = None,
) -> bool:
    """Return True if the notification is authentically from the provider.

    The signature is an HMAC-SHA256 over the message id, the message timestamp
    and the raw body, compared in constant time. When ``max_age`` is given,
    notifications whose timestamp is older than that many seconds are rejected.

    Args:
        secret: The shared secret configured on the subscription.
        headers: The request headers. Lookup ignores case.
        body: The raw, unparsed request body.
        max_age: Maximum accepted message age in seconds, or None to skip the check.
        now: Current time, for tests.

    Returns:
        True if the signature is valid, False otherwise.
    """
    message_id = get_header(headers, MESSAGE_ID_HEADER)
    timestamp = get_header(headers, MESSAGE_TIMESTAMP_HEADER)
    signature = get_header(headers, MESSAGE_SIGNATURE_HEADER)
    if not message_id or not timestamp or not signature:
        logger.warning("Notification is missing signature headers")
        return False
    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("Notification signature has an unexpected format")
        return False

    expected = compute_signature(secret, message_id, timestamp, body)
    # Header values may hold any latin-1 character, and compare_digest only accepts ASCII str.
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", errors="surrogateescape")):
        logger.warning("Notification signature does not match", message_id=message_id)
        return False

    if max_age is not None:
        try:
            sent_at = parse_message_timestamp(timestamp)
        except ValueError:
            logger.warning("Notification timestamp is malformed", message_id=message_id, timestamp=timestamp)
            return False
        age = ((now or datetime.now(timezone.utc)) - sent_at).total_seconds()
        if age > max_age:
            logger.warning("Notification is too old", message_id=message_id, age=round(age, 2), max_age=max_age)
            return False

    return True
