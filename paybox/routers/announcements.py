"""
System update (announcement) endpoints.

GET    /api/updates              — all updates with the caller's viewed flag
GET    /api/updates/unseen       — updates the caller has not viewed
POST   /api/updates              — publish an update (admin/developer)
DELETE /api/updates/{id}         — remove an update (admin/developer)
POST   /api/updates/{id}/view    — mark an update as viewed
"""
from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user
from paybox.database import get_db
from paybox.models import SystemUpdateModel, UpdateViewModel
from paybox.schemas.announcements import SystemUpdateCreate, SystemUpdateResponse
from paybox.services.permissions import require_privileged

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_update(model: SystemUpdateModel, viewed: bool) -> SystemUpdateResponse:
    return SystemUpdateResponse(
        id=model.id,
        title=model.title,
        description=model.description,
        version=model.version,
        category=model.category,
        created_by=model.created_by,
        created_at=model.created_at,
        viewed=viewed,
    )


def _viewed_ids(db: Session, user_id: str) -> set[str]:
    rows = db.query(UpdateViewModel.update_id).filter(UpdateViewModel.user_id == user_id).all()
    return {r[0] for r in rows}


# ── GET /api/updates ─────────────────────────────────────────────────────
@router.get("/updates", response_model=List[SystemUpdateResponse])
def list_updates(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    viewed = _viewed_ids(db, user.id)
    rows = db.query(SystemUpdateModel).order_by(SystemUpdateModel.created_at.desc()).all()
    return [transform_update(u, u.id in viewed) for u in rows]


# ── GET /api/updates/unseen ──────────────────────────────────────────────
@router.get("/updates/unseen", response_model=List[SystemUpdateResponse])
def list_unseen(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    viewed = _viewed_ids(db, user.id)
    rows = db.query(SystemUpdateModel).order_by(SystemUpdateModel.created_at.desc()).all()
    return [transform_update(u, False) for u in rows if u.id not in viewed]


# ── POST /api/updates ────────────────────────────────────────────────────
@router.post("/updates", response_model=SystemUpdateResponse)
def create_update(
    req: SystemUpdateCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    update = SystemUpdateModel(
        id=str(uuid.uuid4()),
        title=req.title,
        description=req.description,
        version=req.version,
        category=req.category.value,
        created_by=user.id,
    )
    db.add(update)
    db.commit()
    logger.info("Published update %s: %s", update.id, update.title)
    return transform_update(update, False)


# ── DELETE /api/updates/{update_id} ──────────────────────────────────────
@router.delete("/updates/{update_id}")
def delete_update(
    update_id: str,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    update = db.query(SystemUpdateModel).filter(SystemUpdateModel.id == update_id).first()
    if not update:
        raise HTTPException(status_code=404, detail="Update not found")
    db.query(UpdateViewModel).filter(UpdateViewModel.update_id == update_id).delete()
    db.delete(update)
    db.commit()
    logger.info("Deleted update %s", update_id)
    return {"message": "Update deleted successfully", "update_id": update_id}


# ── POST /api/updates/{update_id}/view ───────────────────────────────────
@router.post("/updates/{update_id}/view")
def mark_viewed(
    update_id: str,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    if not db.query(SystemUpdateModel).filter(SystemUpdateModel.id == update_id).first():
        raise HTTPException(status_code=404, detail="Update not found")
    if update_id not in _viewed_ids(db, user.id):
        db.add(UpdateViewModel(id=str(uuid.uuid4()), user_id=user.id, update_id=update_id))
        db.commit()
    return {"update_id": update_id, "viewed": True}
