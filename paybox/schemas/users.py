"""
User profile and permission schemas
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    DEVELOPER = "developer"
    USER = "user"
    VIEWER = "viewer"


class Permissions(BaseModel):
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False


class UserProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: Role
    stored_permissions: Permissions
    permissions: Permissions
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None


class UserCreate(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: Role = Role.VIEWER
    permissions: Permissions = Permissions()


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[Role] = None
