"""Fixtures for unit tests."""

from datetime import datetime, timezone
from typing import Callable, Generator

import pytest
import structlog

from stream_status_manager.notifications.verifier import compute_signature

WEBHOOK_SECRET = "s3cr3t-shared-with-twitch"


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def webhook_secret() -> str:
    """The shared secret used to sign test notifications."""
    return WEBHOOK_SECRET


@pytest.fixture
def signed_headers() -> Callable[..., dict[str, str]]:
    """Build EventSub headers that carry a valid signature for a body."""

    def _signed_headers(
        body: bytes,
        secret: str = WEBHOOK_SECRET,
        message_id: str = "e76c6bd4-55c9-4987-8304-da1588d8988b",
        timestamp: str | None = None,
        message_type: str = "notification",
        subscription_type: str = "stream.online",
    ) -> dict[str, str]:
        timestamp = timestamp or datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        return {
            "Twitch-Eventsub-Message-Id": message_id,
            "Twitch-Eventsub-Message-Timestamp": timestamp,
            "Twitch-Eventsub-Message-Signature": compute_signature(secret, message_id, timestamp, body),
            "Twitch-Eventsub-Message-Type": message_type,
            "Twitch-Eventsub-Subscription-Type": subscription_type,
        }

    return _signed_headers
