"""
Admin activity log.

Recording an entry is best effort: a failure is logged and swallowed so that
the admin action which triggered it still succeeds.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.admin import AdminActivity

logger = logging.getLogger(__name__)


def log_admin_activity(
    db: Session,
    admin: Optional[Dict[str, Any]],
    action: str,
    target_entity: Optional[str] = None,
    target_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Optional[AdminActivity]:
    """
    Record an admin action.

    Args:
        db: Database session
        admin: Provider user dict of the acting admin
        action: Action name, e.g. "event.approved"
        target_entity: Kind of record acted on ("event", "deal", ...)
        target_id: Id of the record acted on
        details: Extra JSON-serializable context

    Returns:
        The stored entry, or None if it could not be written
    """
    admin = admin or {}
    entry = AdminActivity(
        admin_id=admin.get("id"),
        admin_email=admin.get("email"),
        action=action,
        target_entity=target_entity,
        target_id=target_id,
        details={k: v for k, v in (details or {}).items() if v is not None},
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to log admin activity {action} on {target_entity}:{target_id}: {e}")
        return None
    return entry


def list_recent_activity(db: Session, limit: int = 20) -> List[AdminActivity]:
    return (
        db.query(AdminActivity)
        .order_by(AdminActivity.created_at.desc())
        .limit(limit)
        .all()
    )
