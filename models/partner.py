from sqlalchemy import Column, String, DateTime, Text

from core.database import Base, new_id, utcnow


class Partner(Base):
    """
    Partner business that offers student deals.

    One registration per contact email.
    """
    __tablename__ = "partners"

    id = Column(String(36), primary_key=True, default=new_id)
    contact_email = Column(String(255), nullable=False, unique=True)
    user_id = Column(String(36), nullable=False, index=True)
    description = Column(Text, nullable=True)
    website_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Partner(id={self.id}, contact_email='{self.contact_email}')>"
