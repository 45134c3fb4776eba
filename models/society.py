from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship

from core.database import Base, new_id, utcnow


class Society(Base):
    """
    Society model

    A student organization that submits events. Name and contact email are
    unique across societies.
    """
    __tablename__ = "societies"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    email = Column(String(255), nullable=True)
    contact_person = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    events = relationship("Event", back_populates="society", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Society(id={self.id}, name='{self.name}')>"
