"""
Event moderation workflow.

Events move between pending, approved and rejected. A rejection stores the
reason and notifies the owning society by email; every admin decision is
written to the activity log. Neither the email nor the log entry can undo a
status change that has already been committed.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from core.mailer import Mailer
from models.event import Event, EVENT_STATUSES
from services.activity import log_admin_activity
from services.notifications import notify_event_rejected

logger = logging.getLogger(__name__)


class EventNotFoundError(Exception):
    """Raised when the event to moderate does not exist."""

    def __init__(self, event_id: str):
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


def set_event_status(
    db: Session,
    event_id: str,
    status: str,
    rejection_reason: Optional[str] = None,
) -> Event:
    """
    Store a new moderation status for an event.

    The rejection reason is kept only while the event is rejected.

    Raises:
        ValueError: If status is not a known event status
        EventNotFoundError: If there is no such event
    """
    if status not in EVENT_STATUSES:
        raise ValueError(f"Invalid status: {status}")

    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise EventNotFoundError(event_id)

    event.status = status
    event.rejection_reason = rejection_reason if status == "rejected" else None
    db.commit()
    db.refresh(event)

    logger.info(f"Event {event_id} status set to {status}")
    return event


def moderate_event(
    db: Session,
    mailer: Mailer,
    admin: Dict[str, Any],
    event_id: str,
    status: str,
    rejection_reason: Optional[str] = None,
) -> Event:
    """
    Apply an admin's moderation decision.

    Updates the status, records the decision in the activity log and, for
    rejections, emails the society.
    """
    event = set_event_status(db, event_id, status, rejection_reason)

    if status in ("approved", "rejected"):
        log_admin_activity(
            db,
            admin,
            action=f"event.{status}",
            target_entity="event",
            target_id=event.id,
            details={"event_name": event.name, "rejection_reason": event.rejection_reason},
        )

    if status == "rejected":
        notify_event_rejected(mailer, event, rejection_reason)

    return event


def delete_event(db: Session, admin: Dict[str, Any], event_id: str) -> str:
    """
    Delete an event on behalf of an admin.

    Returns:
        Name of the deleted event

    Raises:
        EventNotFoundError: If there is no such event
    """
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise EventNotFoundError(event_id)

    name = event.name
    db.delete(event)
    db.commit()
    logger.info(f"Event {event_id} ({name}) deleted by {admin.get('email')}")

    log_admin_activity(
        db,
        admin,
        action="event.deleted",
        target_entity="event",
        target_id=event_id,
        details={"event_name": name},
    )
    return name
