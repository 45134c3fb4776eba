from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.api.deps import get_db
from app.schemas.rsvp import RSVPCreate, RSVPResponse
from app.utils.validation import validate_id
from models.event import Event
from models.rsvp import RSVP
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


def get_rsvp_or_404(db: Session, rsvp_id: str) -> RSVP:
    rsvp = db.query(RSVP).filter(RSVP.id == rsvp_id).first()
    if not rsvp:
        raise HTTPException(status_code=404, detail="RSVP not found.")
    return rsvp


@router.get("", response_model=List[RSVPResponse])
async def list_rsvps(
    event_id: Optional[str] = None,
    user_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List RSVPs, newest first

    Query params:
    - event_id: Only RSVPs for this event
    - user_id: Only RSVPs made by this user
    """
    query = db.query(RSVP)
    if event_id is not None:
        query = query.filter(RSVP.event_id == validate_id(event_id, "event ID"))
    if user_id is not None:
        query = query.filter(RSVP.user_id == validate_id(user_id, "user ID"))
    return query.order_by(RSVP.created_at.desc()).all()


@router.post("", response_model=RSVPResponse, status_code=201)
async def create_rsvp(rsvp: RSVPCreate, db: Session = Depends(get_db)):
    """
    RSVP a user to an event

    A user can RSVP to an event only once.
    """
    if not db.query(User.id).filter(User.id == rsvp.user_id).first():
        raise HTTPException(status_code=400, detail="Invalid user_id.")
    if not db.query(Event.id).filter(Event.id == rsvp.event_id).first():
        raise HTTPException(status_code=400, detail="Invalid event_id.")

    db_rsvp = RSVP(user_id=rsvp.user_id, event_id=rsvp.event_id)
    db.add(db_rsvp)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="User has already RSVPed to this event.")
    db.refresh(db_rsvp)

    logger.info(f"User {rsvp.user_id} RSVPed to event {rsvp.event_id}")
    return db_rsvp


@router.get("/{rsvp_id}", response_model=RSVPResponse)
async def get_rsvp(rsvp_id: str, db: Session = Depends(get_db)):
    """
    Get RSVP by ID
    """
    return get_rsvp_or_404(db, rsvp_id)


@router.delete("/{rsvp_id}", status_code=204)
async def delete_rsvp(rsvp_id: str, db: Session = Depends(get_db)):
    """
    Cancel an RSVP
    """
    rsvp = get_rsvp_or_404(db, rsvp_id)
    db.delete(rsvp)
    db.commit()
    return Response(status_code=204)
