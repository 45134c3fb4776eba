"""
Admin dashboard endpoints

Every route here requires an admin bearer token (see app.middleware.auth).
"""

from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
import logging
import math

from app.api.deps import get_db, get_mailer
from app.middleware.auth import require_admin
from app.schemas.admin import (
    ActivityResponse,
    AdminEventUpdate,
    AdminEventUpdateResponse,
    AdminUserPage,
    DailyCount,
    EventPage,
    SettingsResponse,
    SettingsUpdate,
    SystemStatus,
)
from app.schemas.deal import DealCreate, DealResponse, DealUpdate
from app.utils.validation import as_utc, validate_pagination
from core.mailer import Mailer
from models.admin import PlatformSetting
from models.deal import Deal
from models.event import Event, EVENT_STATUSES
from models.society import Society
from models.user import User, USER_TYPES
from services.activity import list_recent_activity, log_admin_activity
from services.moderation import EventNotFoundError, delete_event, moderate_event

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])

PLATFORM_SETTINGS_KEY = "platform"


# Events

@router.get("/events", response_model=EventPage)
async def list_events(
    page: int = 1,
    limit: int = 10,
    status: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Paginated event list for moderation

    Query params:
    - status: pending, approved, rejected or all
    - search: Case-insensitive match on name or description
    """
    offset, limit = validate_pagination(page, limit)

    query = db.query(Event).options(joinedload(Event.society))
    if status and status != "all":
        if status not in EVENT_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status provided.")
        query = query.filter(Event.status == status)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Event.name.ilike(pattern), Event.description.ilike(pattern)))

    total = query.count()
    events = query.order_by(Event.created_at.desc()).offset(offset).limit(limit).all()

    return {
        "events": events,
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit),
    }


@router.patch("/events", response_model=AdminEventUpdateResponse, response_model_exclude_none=True)
def update_event_status(
    payload: AdminEventUpdate,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    admin: dict = Depends(require_admin)
):
    """
    Set an event's moderation status

    Rejections store the reason and email the owning society.
    """
    try:
        event = moderate_event(
            db, mailer, admin, payload.eventId, payload.status, payload.rejection_reason
        )
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    return {"id": event.id, "status": event.status, "rejection_reason": event.rejection_reason}


@router.delete("/events")
async def remove_event(
    event_id: Optional[str] = Query(None, alias="eventId"),
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin)
):
    """
    Delete an event and its RSVPs
    """
    if not event_id or not event_id.strip():
        raise HTTPException(status_code=400, detail="Event ID is required")

    try:
        delete_event(db, admin, event_id.strip())
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    return {"message": "Event deleted successfully", "eventId": event_id.strip()}


# Users

@router.get("/users", response_model=AdminUserPage)
async def list_users(
    role: str = "all",
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db)
):
    """
    Users and societies in one list, newest first

    Societies are listed with their contact email and role "society".
    """
    if role != "all" and role not in USER_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"role must be one of: all, {', '.join(USER_TYPES)}."
        )
    offset, limit = validate_pagination(page, limit)
    pattern = f"%{search.strip()}%" if search and search.strip() else None

    rows = []

    user_query = db.query(User)
    if role != "all":
        user_query = user_query.filter(User.user_type == role)
    if pattern:
        user_query = user_query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    for user in user_query.all():
        rows.append({
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.user_type,
            "created_at": user.created_at,
        })

    if role in ("all", "society"):
        society_query = db.query(Society)
        if pattern:
            society_query = society_query.filter(
                or_(Society.name.ilike(pattern), Society.contact_email.ilike(pattern))
            )
        for society in society_query.all():
            rows.append({
                "id": society.id,
                "email": society.contact_email,
                "name": society.name,
                "role": "society",
                "created_at": society.created_at,
            })

    rows.sort(key=lambda row: as_utc(row["created_at"]), reverse=True)
    return {"data": rows[offset:offset + limit], "count": len(rows)}


# Dashboard

@router.get("/dashboard", response_model=List[DailyCount])
async def submission_counts(days: int = 7, db: Session = Depends(get_db)):
    """
    Daily event submission counts for the last N days, oldest day first

    Days without submissions are included with a count of 0.
    """
    if not 1 <= days <= 365:
        raise HTTPException(status_code=400, detail="days must be between 1 and 365")

    today = datetime.now(timezone.utc).date()
    first_day = today - timedelta(days=days - 1)
    since = datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)

    counts = {first_day + timedelta(days=i): 0 for i in range(days)}
    for (created_at,) in db.query(Event.created_at).filter(Event.created_at >= since):
        day = as_utc(created_at).date()
        if day in counts:
            counts[day] += 1

    return [{"date": day, "count": count} for day, count in counts.items()]


@router.get("/activity", response_model=List[ActivityResponse])
async def recent_activity(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """
    Latest admin actions, newest first
    """
    return list_recent_activity(db, limit)


# Settings

def _get_or_create_settings(db: Session) -> PlatformSetting:
    setting = db.query(PlatformSetting).filter(PlatformSetting.key == PLATFORM_SETTINGS_KEY).first()
    if setting is None:
        setting = PlatformSetting(key=PLATFORM_SETTINGS_KEY, config={})
        db.add(setting)
        db.commit()
        db.refresh(setting)
    return setting


@router.get("/settings", response_model=SettingsResponse)
async def get_platform_settings(db: Session = Depends(get_db)):
    """
    Platform settings document, created empty on first read
    """
    return _get_or_create_settings(db)


@router.patch("/settings", response_model=SettingsResponse)
async def update_platform_settings(
    payload: SettingsUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin)
):
    """
    Replace the platform settings document
    """
    setting = _get_or_create_settings(db)
    setting.config = payload.config
    setting.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(setting)

    log_admin_activity(db, admin, action="settings.updated", target_entity="settings",
                       target_id=PLATFORM_SETTINGS_KEY)
    return setting


@router.get("/system", response_model=SystemStatus)
async def system_status(db: Session = Depends(get_db)):
    """
    API and database health for the dashboard
    """
    db_status = "ok"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "error"

    return {"api": "ok", "db": db_status, "ts": datetime.now(timezone.utc)}


# Deals

def get_deal_or_404(db: Session, deal_id: str) -> Deal:
    deal = db.query(Deal).filter(Deal.id == deal_id).first()
    if not deal:
        raise HTTPException(status_code=404, detail="Deal not found")
    return deal


@router.get("/deals", response_model=List[DealResponse])
async def list_all_deals(db: Session = Depends(get_db)):
    """
    All deals regardless of status, newest first
    """
    return db.query(Deal).order_by(Deal.created_at.desc()).all()


@router.post("/deals", response_model=DealResponse, status_code=201)
async def create_deal(
    deal: DealCreate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin)
):
    """
    Create a deal; deals created by an admin are published immediately
    """
    db_deal = Deal(**deal.model_dump(), status="approved")
    db.add(db_deal)
    db.commit()
    db.refresh(db_deal)

    log_admin_activity(db, admin, action="deal.created", target_entity="deal",
                       target_id=db_deal.id, details={"title": db_deal.title})
    return db_deal


@router.put("/deals/{deal_id}", response_model=DealResponse)
async def update_deal(
    deal_id: str,
    deal_update: DealUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin)
):
    """
    Update a deal, including approving or rejecting it via status
    """
    update_data = deal_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="At least one field is required to update.")

    deal = get_deal_or_404(db, deal_id)
    for field, value in update_data.items():
        setattr(deal, field, value)
    db.commit()
    db.refresh(deal)

    log_admin_activity(db, admin, action="deal.updated", target_entity="deal",
                       target_id=deal.id, details={"fields": sorted(update_data)})
    return deal


@router.delete("/deals/{deal_id}", status_code=204)
async def delete_deal(
    deal_id: str,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin)
):
    """
    Delete a deal
    """
    deal = get_deal_or_404(db, deal_id)
    title = deal.title
    db.delete(deal)
    db.commit()

    log_admin_activity(db, admin, action="deal.deleted", target_entity="deal",
                       target_id=deal_id, details={"title": title})
    return Response(status_code=204)
