"""
Trailer service API endpoints.

GET    /api/trailers            — list services, newest first
GET    /api/trailers/{id}       — get one service
POST   /api/trailers            — create service
PUT    /api/trailers/{id}       — update service
DELETE /api/trailers/{id}       — delete service
GET    /api/lookups/{kind}      — list clients / trailers / drivers / locations
POST   /api/lookups/{kind}      — create one lookup entry
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user
from paybox.database import get_db
from paybox.dates import utcnow
from paybox.models import LookupEntityModel, TrailerServiceModel
from paybox.schemas.trailers import (
    LookupCreate,
    LookupKind,
    LookupResponse,
    TrailerServiceCreate,
    TrailerServiceResponse,
)
from paybox.services.permissions import require

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_service(model: TrailerServiceModel) -> TrailerServiceResponse:
    return TrailerServiceResponse.model_validate(model, from_attributes=True)


def get_service_or_404(db: Session, service_id: int) -> TrailerServiceModel:
    row = db.query(TrailerServiceModel).filter(TrailerServiceModel.id == service_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Trailer service not found")
    return row


# ── GET /api/trailers ────────────────────────────────────────────────────
@router.get("/trailers", response_model=List[TrailerServiceResponse])
def list_services(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    rows = (
        db.query(TrailerServiceModel)
        .order_by(TrailerServiceModel.service_date.desc(), TrailerServiceModel.id.desc())
        .all()
    )
    return [transform_service(r) for r in rows]


# ── GET /api/trailers/{service_id} ───────────────────────────────────────
@router.get("/trailers/{service_id}", response_model=TrailerServiceResponse)
def get_service(
    service_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return transform_service(get_service_or_404(db, service_id))


# ── POST /api/trailers ───────────────────────────────────────────────────
@router.post("/trailers", response_model=TrailerServiceResponse)
def create_service(
    req: TrailerServiceCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require(user.role, user.stored, "create")
    service = TrailerServiceModel(created_by=user.id, **req.model_dump())
    db.add(service)
    db.commit()
    logger.info("Created trailer service %s", service.id)
    return transform_service(service)


# ── PUT /api/trailers/{service_id} ───────────────────────────────────────
@router.put("/trailers/{service_id}", response_model=TrailerServiceResponse)
def update_service(
    service_id: int,
    req: TrailerServiceCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    service = get_service_or_404(db, service_id)
    require(user.role, user.stored, "edit", actor_id=user.id, owner_id=service.created_by)
    for key, value in req.model_dump().items():
        setattr(service, key, value)
    service.updated_at = utcnow()
    db.commit()
    logger.info("Updated trailer service %s", service_id)
    return transform_service(service)


# ── DELETE /api/trailers/{service_id} ────────────────────────────────────
@router.delete("/trailers/{service_id}")
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    service = get_service_or_404(db, service_id)
    require(user.role, user.stored, "delete", actor_id=user.id, owner_id=service.created_by)
    db.delete(service)
    db.commit()
    logger.info("Deleted trailer service %s", service_id)
    return {"message": "Trailer service deleted successfully", "service_id": service_id}


# ── GET /api/lookups/{kind} ──────────────────────────────────────────────
@router.get("/lookups/{kind}", response_model=List[LookupResponse])
def list_lookups(
    kind: LookupKind,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    rows = (
        db.query(LookupEntityModel)
        .filter(LookupEntityModel.kind == kind.value)
        .order_by(LookupEntityModel.name)
        .all()
    )
    return [LookupResponse(id=r.id, kind=r.kind, name=r.name) for r in rows]


# ── POST /api/lookups/{kind} ─────────────────────────────────────────────
@router.post("/lookups/{kind}", response_model=LookupResponse)
def create_lookup(
    kind: LookupKind,
    req: LookupCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require(user.role, user.stored, "create")
    entry = LookupEntityModel(kind=kind.value, name=req.name.strip())
    db.add(entry)
    db.commit()
    logger.info("Created %s lookup: %s", kind.value, entry.name)
    return LookupResponse(id=entry.id, kind=entry.kind, name=entry.name)
