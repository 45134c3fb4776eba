from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from core.database import Base, new_id, utcnow

EVENT_STATUSES = ("pending", "approved", "rejected")

EVENT_CATEGORIES = (
    "academic",
    "active sport",
    "interest",
    "political and cause",
    "cultural and faith",
    "professional development",
    "media",
    "theatre",
    "music",
    "fundraising",
    "associations",
    "social",
    "miscellaneous",
)


class Event(Base):
    """
    Event model

    An event submitted by a society. New events start as pending and only
    become publicly listed once an admin approves them.
    """
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("attendee_count >= 0", name="ck_events_attendee_count_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(64), nullable=True)
    society_id = Column(String(36), ForeignKey("societies.id", ondelete="CASCADE"), nullable=False, index=True)
    signup_link = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    status = Column(String(16), nullable=False, default="pending", index=True)
    rejection_reason = Column(Text, nullable=True)
    attendee_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    society = relationship("Society", back_populates="events")
    rsvps = relationship("RSVP", back_populates="event", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name='{self.name}', status={self.status})>"
