"""
Skill Revision Lifecycle

Revisions move forward only: draft -> active -> archived. Works on any
object with ``status``, ``created_at`` and ``requires_retraining``
attributes (ORM rows in practice).
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from services.compliance_service.expiration import ensure_utc
from services.compliance_service.records import RevisionStatus
from shared.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_TRANSITIONS = {
    RevisionStatus.DRAFT: {RevisionStatus.ACTIVE},
    RevisionStatus.ACTIVE: {RevisionStatus.ARCHIVED},
    RevisionStatus.ARCHIVED: set(),
}


class InvalidRevisionTransition(ValueError):
    """Raised when a revision is moved backwards or skips a state."""

    def __init__(self, current: RevisionStatus, target: RevisionStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move revision from {current.value} to {target.value}")


def can_transition(current: RevisionStatus | str, target: RevisionStatus | str) -> bool:
    return RevisionStatus(target) in ALLOWED_TRANSITIONS[RevisionStatus(current)]


def transition(revision: Any, target: RevisionStatus | str) -> None:
    """Move a revision to ``target`` or raise InvalidRevisionTransition."""
    current = RevisionStatus(revision.status)
    target = RevisionStatus(target)
    if not can_transition(current, target):
        raise InvalidRevisionTransition(current, target)
    revision.status = target.value


def select_current_revision(revisions: Iterable[Any]) -> Any | None:
    """The most recently created active revision, or None."""
    active = [r for r in revisions if RevisionStatus(r.status) == RevisionStatus.ACTIVE]
    if not active:
        return None
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return max(active, key=lambda r: ensure_utc(r.created_at) or epoch)


def activate_revision(revision: Any, siblings: Iterable[Any]) -> list[Any]:
    """
    Activate a draft revision.

    When the revision requires retraining, every other active revision of
    the same skill is archived, which makes certifications against them
    outdated.

    Returns:
        Revisions that were archived
    """
    transition(revision, RevisionStatus.ACTIVE)

    archived = []
    if revision.requires_retraining:
        for other in siblings:
            if other is revision:
                continue
            if RevisionStatus(other.status) == RevisionStatus.ACTIVE:
                transition(other, RevisionStatus.ARCHIVED)
                archived.append(other)

    logger.info(
        "Activated skill revision",
        requires_retraining=revision.requires_retraining,
        archived=len(archived),
    )
    return archived
