"""
Admin bookkeeping models: the activity log read by the dashboard and the
platform settings document.
"""

from sqlalchemy import Column, String, DateTime, JSON

from core.database import Base, new_id, utcnow


class AdminActivity(Base):
    __tablename__ = "admin_activity_log"

    id = Column(String(36), primary_key=True, default=new_id)
    admin_id = Column(String(64), nullable=True)
    admin_email = Column(String(255), nullable=True)
    action = Column(String(64), nullable=False)
    target_entity = Column(String(32), nullable=True)
    target_id = Column(String(64), nullable=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


class PlatformSetting(Base):
    __tablename__ = "platform_settings"

    key = Column(String(64), primary_key=True)
    config = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), nullable=True, default=utcnow, onupdate=utcnow)
