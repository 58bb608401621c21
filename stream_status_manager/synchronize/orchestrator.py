"""Orchestrates status synchronization for incoming webhook notifications."""

import asyncio
import time
from collections.abc import Mapping
from contextlib import AbstractAsyncContextManager
from typing import Any

import structlog

from stream_status_manager.configuration.models import AbsentEntityPolicy
from stream_status_manager.document.status import StatusUpdateOutcome, update_status
from stream_status_manager.notifications.decoder import decode_notification
from stream_status_manager.notifications.exceptions import NotificationDecodeError
from stream_status_manager.notifications.models import (
    ChallengeRequest,
    EntityOfflineEvent,
    EntityOnlineEvent,
    SubscriptionRevoked,
)
from stream_status_manager.notifications.verifier import verify_notification
from stream_status_manager.repository.exceptions import RepositoryError
from stream_status_manager.repository.manager import DocumentRepositoryManager
from stream_status_manager.synchronize.results import SyncEvent, SyncOutcome, SyncResult, SyncStage, WebhookReply
from stream_status_manager.utils.constants import MESSAGE_TYPE_HEADER, SUBSCRIPTION_TYPE_HEADER
from stream_status_manager.utils.helpers import get_header

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class StatusSyncOrchestrator:
    """Turns verified stream notifications into commits on the status repository.

    The repository manager is shared by every delivery, so whole sync cycles
    run under a lock. Any async context manager can be injected in place of
    the default asyncio.Lock.
    """

    def __init__(
        self,
        repository: DocumentRepositoryManager,
        webhook_secret: str,
        absent_entity_policy: AbsentEntityPolicy = AbsentEntityPolicy.IGNORE,
        max_message_age: int | None = None,
        lock: AbstractAsyncContextManager[Any] | None = None,
    ) -> None:
        """Initialize the orchestrator with the repository handle and webhook secret."""
        self.repository = repository
        self.webhook_secret = webhook_secret
        self.absent_entity_policy = absent_entity_policy
        self.max_message_age = max_message_age
        self.lock = lock or asyncio.Lock()

    def handle_notification(self, body: bytes, headers: Mapping[str, str]) -> WebhookReply:
        """Verify and decode a webhook delivery and decide how to reply.

        Online and offline events are acknowledged right away; the returned
        reply carries the SyncEvent that the caller must pass to
        synchronize() once the response has been sent.
        """
        if not verify_notification(self.webhook_secret, headers, body, max_age=self.max_message_age):
            logger.warning("Invalid signature on message", stage=SyncStage.VERIFYING.value)
            return WebhookReply(status_code=403)
        logger.info("Verified signature on message")

        try:
            notification = decode_notification(body, message_type=get_header(headers, MESSAGE_TYPE_HEADER))
        except NotificationDecodeError as e:
            logger.error("Unable to decode notification", stage=SyncStage.DECODING.value, error=str(e))
            return WebhookReply(status_code=400)

        if isinstance(notification, ChallengeRequest):
            logger.info("Answering subscription challenge")
            return WebhookReply(status_code=200, body=notification.challenge)

        if isinstance(notification, EntityOfflineEvent):
            logger.info("Got offline event", entity=notification.entity)
            return WebhookReply(status_code=200, body="ok", sync_event=SyncEvent(entity=notification.entity, online=False))

        if isinstance(notification, EntityOnlineEvent):
            logger.info("Got online event", entity=notification.entity)
            return WebhookReply(status_code=200, body="ok", sync_event=SyncEvent(entity=notification.entity, online=True))

        if isinstance(notification, SubscriptionRevoked):
            logger.warning("Subscription was revoked", subscription_type=notification.subscription_type, status=notification.status)
            return WebhookReply(status_code=200)

        logger.warning(
            "Event type has not been implemented",
            subscription_type=notification.type_name or get_header(headers, SUBSCRIPTION_TYPE_HEADER),
        )
        return WebhookReply(status_code=200)

    async def synchronize(self, event: SyncEvent) -> SyncResult:
        """Apply a status change to the repository and publish it.

        Cycles are serialized by the orchestrator's lock.
        """
        async with self.lock:
            start_time = time.time()
            result = await self._synchronize(event)
            log = logger.error if result.failed else logger.info
            log(
                "Finished status synchronization",
                entity=event.entity,
                online=event.online,
                outcome=result.outcome.value,
                stage=result.stage.value,
                reason=result.reason,
                commit=result.commit,
                duration=round(time.time() - start_time, 2),
            )
            return result

    async def _synchronize(self, event: SyncEvent) -> SyncResult:
        stage = SyncStage.ENSURING_WORKING_COPY
        try:
            await self.repository.ensure_working_copy()

            stage = SyncStage.READING_DOCUMENT
            document = self.repository.read_document()

            stage = SyncStage.UPDATING_STATUS
            update = update_status(document, event.entity, event.online, absent_entity_policy=self.absent_entity_policy)
            if not update.succeeded:
                return SyncResult(event=event, outcome=SyncOutcome.FAILED, stage=stage, reason=update.reason)
            if not update.changed:
                logger.info("Status document doesn't need to be changed", entity=event.entity, online=event.online)
                outcome = SyncOutcome.ENTITY_ABSENT if update.outcome == StatusUpdateOutcome.ENTITY_ABSENT else SyncOutcome.NO_CHANGE_NEEDED
                return SyncResult(event=event, outcome=outcome, stage=SyncStage.DONE, reason=update.reason)

            stage = SyncStage.WRITING_DOCUMENT
            self.repository.write_document(update.text)

            stage = SyncStage.COMMITTING
            commit = await self.repository.stage_and_commit(event.entity, event.online)

            stage = SyncStage.PUSHING
            await self.repository.push()
        except RepositoryError as e:
            return SyncResult(event=event, outcome=SyncOutcome.FAILED, stage=stage, reason=str(e))

        return SyncResult(event=event, outcome=SyncOutcome.PUSHED, stage=SyncStage.DONE, commit=commit)
