from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from core.database import Base, new_id, utcnow

USER_TYPES = ("student", "society", "organization")


class User(Base):
    """
    User profile model

    Profile data only. Credentials are held by the external auth provider and
    matched to this table by email.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    user_type = Column(String(32), nullable=False, default="student")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    rsvps = relationship("RSVP", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', user_type={self.user_type})>"
