"""
User profile (role + stored permissions)
"""
from sqlalchemy import Boolean, Column, DateTime, String

from paybox.dates import utcnow
from paybox.database import Base


class UserProfileModel(Base):
    __tablename__ = "user_profiles"

    id = Column(String, primary_key=True)  # identity provider subject
    email = Column(String, nullable=False, unique=True)
    full_name = Column(String)
    role = Column(String, nullable=False, default="viewer")  # admin, developer, user, viewer
    # Only meaningful for the "user" role
    can_create = Column(Boolean, nullable=False, default=False)
    can_edit = Column(Boolean, nullable=False, default=False)
    can_delete = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    last_sign_in_at = Column(DateTime)
