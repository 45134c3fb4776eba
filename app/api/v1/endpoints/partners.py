from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from app.api.deps import get_db
from app.schemas.partner import PartnerCreate, PartnerResponse
from models.partner import Partner

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=PartnerResponse, status_code=201)
async def register_partner(partner: PartnerCreate, db: Session = Depends(get_db)):
    """
    Register a partner business

    The contact email identifies the partner; a second registration with the
    same address is a conflict.
    """
    db_partner = Partner(**partner.model_dump())
    db.add(db_partner)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Partner with this email already exists.")
    db.refresh(db_partner)

    logger.info(f"Partner {db_partner.id} registered: {db_partner.contact_email}")
    return db_partner
