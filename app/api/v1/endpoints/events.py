from collections import defaultdict
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session, joinedload
from typing import Any, Dict, List, Optional
import logging

from app.api.deps import get_db, get_mailer
from app.middleware.auth import require_admin
from app.schemas.event import EventCreate, EventReject, EventResponse, EventUpdate
from app.utils.validation import as_utc, day_bounds, validate_id
from core.mailer import Mailer
from models.event import Event
from models.society import Society
from services.moderation import EventNotFoundError, moderate_event

logger = logging.getLogger(__name__)

router = APIRouter()


def get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found.")
    return event


def _approved_events(db: Session):
    return (
        db.query(Event)
        .options(joinedload(Event.society))
        .filter(Event.status == "approved")
        .order_by(Event.start_time.asc())
    )


@router.get("", response_model=List[EventResponse])
async def list_events(
    date: Optional[str] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List approved events

    Query params:
    - date: Only events starting on this UTC day (YYYY-MM-DD)
    - category: Only events in this category
    """
    query = _approved_events(db)
    if date is not None:
        start, end = day_bounds(date)
        query = query.filter(Event.start_time >= start, Event.start_time < end)
    if category:
        query = query.filter(Event.category == category.strip().lower())
    return query.all()


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(event: EventCreate, db: Session = Depends(get_db)):
    """
    Submit a new event

    Societies submit events which start out pending until an admin
    approves them.
    """
    society = db.query(Society).filter(Society.id == event.society_id).first()
    if not society:
        raise HTTPException(status_code=400, detail="Invalid society_id.")

    db_event = Event(
        **event.model_dump(),
        status="pending",
        attendee_count=0,
    )
    db.add(db_event)
    db.commit()
    db.refresh(db_event)

    logger.info(f"Event {db_event.id} submitted by society {society.id}")
    return db_event


@router.get("/pending", response_model=List[EventResponse])
async def list_pending_events(
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin)
):
    """
    Events awaiting moderation, newest submission first (admin only)
    """
    return (
        db.query(Event)
        .options(joinedload(Event.society))
        .filter(Event.status == "pending")
        .order_by(Event.created_at.desc())
        .all()
    )


@router.get("/by-date", response_model=Dict[str, List[EventResponse]])
async def list_events_by_date(db: Session = Depends(get_db)):
    """
    Approved events grouped by the UTC day they start on
    """
    grouped: Dict[str, List[Any]] = defaultdict(list)
    for event in _approved_events(db).all():
        grouped[as_utc(event.start_time).date().isoformat()].append(event)
    return grouped


@router.get("/society/{society_id}", response_model=List[EventResponse])
async def list_society_events(society_id: str, db: Session = Depends(get_db)):
    """
    All events of one society regardless of status, in start order
    """
    society_id = validate_id(society_id, "society ID")
    return (
        db.query(Event)
        .filter(Event.society_id == society_id)
        .order_by(Event.start_time.asc())
        .all()
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, db: Session = Depends(get_db)):
    """
    Get event by ID
    """
    return get_event_or_404(db, event_id)


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    db: Session = Depends(get_db)
):
    """
    Update event details

    Only provided fields change. When just one of start_time/end_time is
    sent, it is checked against the stored other bound.
    """
    event = get_event_or_404(db, event_id)

    update_data = event_update.model_dump(exclude_unset=True)
    start = update_data.get("start_time") or as_utc(event.start_time)
    end = update_data.get("end_time") or as_utc(event.end_time)
    if start >= end:
        raise HTTPException(status_code=400, detail="start_time must be before end_time.")

    for field, value in update_data.items():
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}", status_code=204)
async def delete_event(event_id: str, db: Session = Depends(get_db)):
    """
    Delete event

    RSVPs for the event are removed with it.
    """
    event = get_event_or_404(db, event_id)
    db.delete(event)
    db.commit()
    return Response(status_code=204)


@router.post("/{event_id}/approve", response_model=EventResponse)
def approve_event(
    event_id: str,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    admin: dict = Depends(require_admin)
):
    """
    Approve a submitted event (admin only)
    """
    try:
        return moderate_event(db, mailer, admin, event_id, "approved")
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found.")


@router.post("/{event_id}/reject", response_model=EventResponse)
def reject_event(
    event_id: str,
    payload: Optional[EventReject] = None,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    admin: dict = Depends(require_admin)
):
    """
    Reject a submitted event (admin only)

    The society's contact is emailed the reason. A failed email is logged
    and does not undo the rejection.
    """
    reason = payload.reason if payload else None
    try:
        return moderate_event(db, mailer, admin, event_id, "rejected", reason)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found.")
