"""
User profile API endpoints.

GET   /api/me                          — current profile + effective permissions
GET   /api/users                       — list profiles (admin)
POST  /api/users                       — create profile (admin)
PATCH /api/users/{id}                  — change name / role (admin)
PATCH /api/users/{id}/permissions      — change stored permissions (admin)
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user, stored_permissions
from paybox.database import get_db
from paybox.dates import utcnow
from paybox.errors import AuthorizationError, ValidationError
from paybox.models import UserProfileModel
from paybox.schemas import (
    Permissions,
    Role,
    UserCreate,
    UserProfileResponse,
    UserUpdate,
)
from paybox.services.permissions import effective_permissions, is_privileged, parse_role

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_profile(model: UserProfileModel) -> UserProfileResponse:
    stored = stored_permissions(model)
    return UserProfileResponse(
        id=model.id,
        email=model.email,
        full_name=model.full_name,
        role=parse_role(model.role),
        stored_permissions=stored,
        permissions=effective_permissions(model.role, stored),
        created_at=model.created_at,
        last_sign_in_at=model.last_sign_in_at,
    )


def require_admin(user: CurrentUser) -> None:
    if user.role != Role.ADMIN:
        raise AuthorizationError("Admin role required")


def get_profile_or_404(db: Session, user_id: str) -> UserProfileModel:
    profile = db.query(UserProfileModel).filter(UserProfileModel.id == user_id).first()
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


# ── GET /api/me ──────────────────────────────────────────────────────────
@router.get("/me", response_model=UserProfileResponse)
def me(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return transform_profile(get_profile_or_404(db, user.id))


# ── GET /api/users ───────────────────────────────────────────────────────
@router.get("/users", response_model=List[UserProfileResponse])
def list_users(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_admin(user)
    rows = db.query(UserProfileModel).order_by(UserProfileModel.created_at.desc()).all()
    return [transform_profile(p) for p in rows]


# ── POST /api/users ──────────────────────────────────────────────────────
@router.post("/users", response_model=UserProfileResponse)
def create_user(
    req: UserCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_admin(user)
    existing = (
        db.query(UserProfileModel)
        .filter((UserProfileModel.id == req.id) | (UserProfileModel.email == req.email))
        .first()
    )
    if existing:
        raise ValidationError(f"User already exists: {req.email}")

    profile = UserProfileModel(
        id=req.id,
        email=req.email,
        full_name=req.full_name,
        role=req.role.value,
        **req.permissions.model_dump(),
    )
    db.add(profile)
    db.commit()
    logger.info("Created user %s with role %s", req.email, req.role.value)
    return transform_profile(profile)


# ── PATCH /api/users/{user_id} ───────────────────────────────────────────
@router.patch("/users/{user_id}", response_model=UserProfileResponse)
def update_user(
    user_id: str,
    req: UserUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_admin(user)
    profile = get_profile_or_404(db, user_id)
    if req.full_name is not None:
        profile.full_name = req.full_name
    if req.role is not None:
        profile.role = req.role.value
    profile.updated_at = utcnow()
    db.commit()
    logger.info("Updated user %s", user_id)
    return transform_profile(profile)


# ── PATCH /api/users/{user_id}/permissions ───────────────────────────────
@router.patch("/users/{user_id}/permissions", response_model=UserProfileResponse)
def update_permissions(
    user_id: str,
    req: Permissions,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_admin(user)
    profile = get_profile_or_404(db, user_id)
    if is_privileged(profile.role):
        raise AuthorizationError("Cannot modify permissions of admin or developer users")

    profile.can_create = req.can_create
    profile.can_edit = req.can_edit
    profile.can_delete = req.can_delete
    profile.updated_at = utcnow()
    db.commit()
    logger.info("Updated permissions for %s: %s", user_id, req.model_dump())
    return transform_profile(profile)
