"""
System updates (release notes) and per-user view tracking
"""
from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint

from paybox.dates import utcnow
from paybox.database import Base


class SystemUpdateModel(Base):
    __tablename__ = "system_updates"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    version = Column(String)
    category = Column(String, nullable=False, default="general")  # feature, bugfix, improvement, general
    created_by = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class UpdateViewModel(Base):
    __tablename__ = "update_views"
    __table_args__ = (UniqueConstraint("user_id", "update_id"),)

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    update_id = Column(String, nullable=False, index=True)
    viewed_at = Column(DateTime, default=utcnow, nullable=False)
