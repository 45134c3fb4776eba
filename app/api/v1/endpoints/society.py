"""
Tools for society organisers: viewing and exporting an event's RSVP list.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
import logging

from app.api.deps import get_db, get_mailer
from app.schemas.rsvp import EmailRSVPListRequest, RSVPListResponse
from app.utils.validation import validate_id
from core.mailer import Mailer, MailerError
from models.event import Event
from models.rsvp import RSVP
from services.notifications import build_rsvp_csv, send_rsvp_list

logger = logging.getLogger(__name__)

router = APIRouter()


def _event_rsvps(db: Session, event_id: str):
    return (
        db.query(RSVP)
        .options(joinedload(RSVP.user))
        .filter(RSVP.event_id == event_id)
        .order_by(RSVP.created_at.asc())
        .all()
    )


@router.get("/rsvp-list", response_model=RSVPListResponse)
async def rsvp_list(
    event_id: str = Query(..., alias="eventId"),
    db: Session = Depends(get_db)
):
    """
    RSVPs for an event with each attendee's name and email
    """
    event_id = validate_id(event_id, "eventId")
    return {"event_id": event_id, "rsvps": _event_rsvps(db, event_id)}


@router.post("/email-rsvp-list")
def email_rsvp_list(
    payload: EmailRSVPListRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer)
):
    """
    Email an event's RSVP list to the owning society

    The list is sent as CSV in the plaintext part and as a table in the
    HTML part.
    """
    event = (
        db.query(Event)
        .options(joinedload(Event.society))
        .filter(Event.id == payload.eventId)
        .first()
    )
    if not event:
        raise HTTPException(status_code=404, detail="Event not found.")
    society = event.society
    if not society or not society.contact_email:
        raise HTTPException(status_code=404, detail="Society not found or has no contact email.")

    csv_text = build_rsvp_csv(_event_rsvps(db, event.id))
    try:
        send_rsvp_list(mailer, society, event, csv_text)
    except MailerError as e:
        logger.error(f"Sending RSVP list for event {event.id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to send email.")

    return {"message": "RSVP list sent successfully."}
