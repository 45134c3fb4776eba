from sqlalchemy import Column, String, DateTime, Text

from core.database import Base, new_id, utcnow

DEAL_STATUSES = ("pending", "approved", "rejected")


class Deal(Base):
    """
    Student deal offered by a partner business.

    Moderated the same way as events: only approved deals are listed publicly.
    """
    __tablename__ = "deals"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    code = Column(String(64), nullable=True)
    terms = Column(Text, nullable=True)
    action_label = Column(String(64), nullable=True)
    action_url = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    contact_email = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)
