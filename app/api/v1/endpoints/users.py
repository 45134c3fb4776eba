from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from app.api.deps import get_db
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from models.user import User, USER_TYPES

router = APIRouter()

DUPLICATE_USER = "A user with this email already exists."


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(user_type: Optional[str] = None, db: Session = Depends(get_db)):
    """
    List users, newest first, optionally filtered by user_type
    """
    query = db.query(User)
    if user_type is not None:
        if user_type not in USER_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"user_type must be one of: {', '.join(USER_TYPES)}."
            )
        query = query.filter(User.user_type == user_type)
    return query.order_by(User.created_at.desc()).all()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """
    Create a user profile
    """
    db_user = User(**user.model_dump())
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_USER)
    db.refresh(db_user)
    return db_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: Session = Depends(get_db)):
    """
    Get user by ID
    """
    return get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, user_update: UserUpdate, db: Session = Depends(get_db)):
    """
    Update user profile
    """
    update_data = user_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="At least one field is required to update.")

    user = get_user_or_404(db, user_id)
    for field, value in update_data.items():
        setattr(user, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_USER)
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, db: Session = Depends(get_db)):
    """
    Delete user and their RSVPs
    """
    user = get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    return Response(status_code=204)
