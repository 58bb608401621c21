"""Toggles an entity's status row in the status document."""

from dataclasses import dataclass
from enum import Enum

import structlog

from stream_status_manager.configuration.models import AbsentEntityPolicy
from stream_status_manager.utils.constants import OFFLINE_MARKER_TEMPLATE, ONLINE_MARKER_TEMPLATE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class StatusUpdateOutcome(str, Enum):
    """Outcome of updating an entity's status row."""

    UPDATED = "updated"
    NO_CHANGE_NEEDED = "no_change_needed"
    ENTITY_ABSENT = "entity_absent"
    FAILED = "failed"


@dataclass(frozen=True)
class StatusUpdate:
    """Result of a status update: the outcome and the resulting document text."""

    outcome: StatusUpdateOutcome
    text: str
    reason: str | None = None

    @property
    def changed(self) -> bool:
        """Whether the document text needs to be written back."""
        return self.outcome == StatusUpdateOutcome.UPDATED

    @property
    def succeeded(self) -> bool:
        """Whether the update finished without an error."""
        return self.outcome != StatusUpdateOutcome.FAILED


def online_marker(name: str) -> str:
    """Return the row marker for an entity that is live."""
    return ONLINE_MARKER_TEMPLATE.format(name=name)


def offline_marker(name: str) -> str:
    """Return the row marker for an entity that is offline."""
    return OFFLINE_MARKER_TEMPLATE.format(name=name)


def update_status(
    document: str,
    entity: str,
    online: bool,
    absent_entity_policy: AbsentEntityPolicy = AbsentEntityPolicy.IGNORE,
) -> StatusUpdate:
    """Set the entity's status row to online or offline.

    Rows may spell the entity in its original case or in lowercase. If a row
    already shows the desired state in either spelling, nothing changes.
    Otherwise the first row showing the opposite state (original case first,
    then lowercase) is replaced by the desired marker, always written with the
    original-case name. Only the first match is replaced.

    Args:
        document: Full text of the status document.
        entity: Entity name as received from the provider.
        online: Desired state.
        absent_entity_policy: What to report when the entity has no row at all.

    Returns:
        StatusUpdate: The outcome and the resulting text.
    """
    lowered = entity.lower()
    if online:
        desired, current = online_marker, offline_marker
    else:
        desired, current = offline_marker, online_marker

    if desired(entity) in document or desired(lowered) in document:
        logger.info("Status document already up to date", entity=entity, online=online)
        return StatusUpdate(
            outcome=StatusUpdateOutcome.NO_CHANGE_NEEDED,
            text=document,
            reason=f"no change needed for: {entity}, online: {online}",
        )

    if current(entity) in document:
        search = current(entity)
    elif current(lowered) in document:
        search = current(lowered)
    else:
        reason = f"no status row found for: {entity}"
        if absent_entity_policy == AbsentEntityPolicy.ERROR:
            logger.error("Entity is missing from the status document", entity=entity, online=online)
            return StatusUpdate(outcome=StatusUpdateOutcome.FAILED, text=document, reason=reason)
        logger.warning("Entity is missing from the status document", entity=entity, online=online)
        return StatusUpdate(outcome=StatusUpdateOutcome.ENTITY_ABSENT, text=document, reason=reason)

    logger.info("Updating status row", entity=entity, online=online, matched=search)
    return StatusUpdate(outcome=StatusUpdateOutcome.UPDATED, text=document.replace(search, desired(entity), 1))
