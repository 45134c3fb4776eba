from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from app.api.deps import get_db
from app.middleware.auth import require_user
from app.schemas.deal import DealCreate, DealResponse
from models.deal import Deal

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[DealResponse])
async def list_deals(db: Session = Depends(get_db)):
    """
    Approved student deals, newest first
    """
    return (
        db.query(Deal)
        .filter(Deal.status == "approved")
        .order_by(Deal.created_at.desc())
        .all()
    )


@router.post("", response_model=DealResponse, status_code=201)
def submit_deal(
    deal: DealCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_user)
):
    """
    Submit a deal for review

    Deals start out pending; contact_email defaults to the submitter's email.
    """
    data = deal.model_dump()
    if not data.get("contact_email"):
        data["contact_email"] = user.get("email")

    db_deal = Deal(**data, status="pending")
    db.add(db_deal)
    db.commit()
    db.refresh(db_deal)

    logger.info(f"Deal {db_deal.id} submitted by {user.get('email')}")
    return db_deal
