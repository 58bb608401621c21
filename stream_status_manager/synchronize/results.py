"""Contains results of the status synchronization workflow."""

from dataclasses import dataclass
from enum import Enum


class SyncStage(str, Enum):
    """Stages a notification passes through."""

    VERIFYING = "verifying"
    DECODING = "decoding"
    ENSURING_WORKING_COPY = "ensuring_working_copy"
    READING_DOCUMENT = "reading_document"
    UPDATING_STATUS = "updating_status"
    WRITING_DOCUMENT = "writing_document"
    COMMITTING = "committing"
    PUSHING = "pushing"
    DONE = "done"


class SyncOutcome(str, Enum):
    """How a sync cycle ended."""

    PUSHED = "pushed"
    NO_CHANGE_NEEDED = "no_change_needed"
    ENTITY_ABSENT = "entity_absent"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncEvent:
    """A request to set an entity's status, produced by decoding a notification."""

    entity: str
    online: bool


@dataclass(frozen=True)
class SyncResult:
    """Contains the result of one sync cycle."""

    event: SyncEvent
    outcome: SyncOutcome
    stage: SyncStage
    reason: str | None = None
    commit: str | None = None

    @property
    def failed(self) -> bool:
        """Whether the cycle was aborted by an error."""
        return self.outcome == SyncOutcome.FAILED


@dataclass(frozen=True)
class WebhookReply:
    """HTTP reply for a webhook delivery, plus the sync work to run after replying."""

    status_code: int
    body: str = ""
    sync_event: SyncEvent | None = None
