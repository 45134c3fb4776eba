from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
import logging

from app.api.deps import get_db
from app.schemas.society import SocietyCreate, SocietyResponse, SocietyUpdate
from models.society import Society

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_SOCIETY = "A society with this name or contact email already exists."


def get_society_or_404(db: Session, society_id: str) -> Society:
    society = db.query(Society).filter(Society.id == society_id).first()
    if not society:
        raise HTTPException(status_code=404, detail="Society not found.")
    return society


def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_SOCIETY)


@router.get("", response_model=List[SocietyResponse])
async def list_societies(db: Session = Depends(get_db)):
    """
    List all societies, alphabetically
    """
    return db.query(Society).order_by(Society.name.asc()).all()


@router.post("", response_model=SocietyResponse, status_code=201)
async def create_society(society: SocietyCreate, db: Session = Depends(get_db)):
    """
    Register a society

    Name and contact email must both be unique.
    """
    db_society = Society(**society.model_dump())
    db.add(db_society)
    _commit_unique(db)
    db.refresh(db_society)

    logger.info(f"Society {db_society.id} registered: {db_society.name}")
    return db_society


@router.get("/{society_id}", response_model=SocietyResponse)
async def get_society(society_id: str, db: Session = Depends(get_db)):
    """
    Get society by ID
    """
    return get_society_or_404(db, society_id)


@router.put("/{society_id}", response_model=SocietyResponse)
async def update_society(
    society_id: str,
    society_update: SocietyUpdate,
    db: Session = Depends(get_db)
):
    """
    Update society details; at least one field must be sent
    """
    update_data = society_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="At least one field is required to update.")

    society = get_society_or_404(db, society_id)
    for field, value in update_data.items():
        setattr(society, field, value)

    _commit_unique(db)
    db.refresh(society)
    return society


@router.delete("/{society_id}", status_code=204)
async def delete_society(society_id: str, db: Session = Depends(get_db)):
    """
    Delete society along with its events and their RSVPs
    """
    society = get_society_or_404(db, society_id)
    db.delete(society)
    db.commit()

    logger.info(f"Society {society_id} deleted")
    return Response(status_code=204)
