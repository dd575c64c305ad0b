"""
Category API endpoints.

GET    /api/categories             — list categories
GET    /api/categories/{id}        — get one category
POST   /api/categories             — create category (admin/developer)
PUT    /api/categories/{id}        — update category (admin/developer)
DELETE /api/categories/{id}        — delete unused category (admin/developer)
POST   /api/categories/{id}/form   — reshape an in-progress form to this category
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user
from paybox.database import get_db
from paybox.errors import ValidationError
from paybox.models import CategoryModel, PaymentModel
from paybox.schemas import (
    CategoryCreate,
    CategoryResponse,
    FormStateRequest,
    FormStateResponse,
)
from paybox.services.fields import missing_fields, reshape_fields
from paybox.services.permissions import require_privileged

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_category(model: CategoryModel) -> CategoryResponse:
    return CategoryResponse(
        id=model.id,
        code=model.code,
        name=model.name,
        nature=model.nature,
        subgroup=model.subgroup,
        cost_center=model.cost_center,
        required_fields=model.required_fields or [],
        created_at=model.created_at,
    )


def get_category_or_404(db: Session, category_id: int) -> CategoryModel:
    category = db.query(CategoryModel).filter(CategoryModel.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


# ── GET /api/categories ──────────────────────────────────────────────────
@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    rows = db.query(CategoryModel).order_by(CategoryModel.name).all()
    return [transform_category(c) for c in rows]


# ── GET /api/categories/{category_id} ────────────────────────────────────
@router.get("/categories/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return transform_category(get_category_or_404(db, category_id))


# ── POST /api/categories ─────────────────────────────────────────────────
@router.post("/categories", response_model=CategoryResponse)
def create_category(
    req: CategoryCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    if db.query(CategoryModel).filter(CategoryModel.code == req.code).first():
        raise ValidationError(f"Category code already exists: {req.code}")

    category = CategoryModel(**req.model_dump())
    db.add(category)
    db.commit()
    logger.info("Created category %s (%d required fields)", category.code, len(category.required_fields))
    return transform_category(category)


# ── PUT /api/categories/{category_id} ────────────────────────────────────
@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    req: CategoryCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    category = get_category_or_404(db, category_id)
    clash = (
        db.query(CategoryModel)
        .filter(CategoryModel.code == req.code, CategoryModel.id != category_id)
        .first()
    )
    if clash:
        raise ValidationError(f"Category code already exists: {req.code}")

    # Existing payments keep the dynamic fields they were created with
    for key, value in req.model_dump().items():
        setattr(category, key, value)
    db.commit()
    logger.info("Updated category %s", category.code)
    return transform_category(category)


# ── DELETE /api/categories/{category_id} ─────────────────────────────────
@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    category = get_category_or_404(db, category_id)
    in_use = db.query(PaymentModel).filter(PaymentModel.category_id == category_id).count()
    if in_use:
        raise ValidationError(
            f"Category is used by {in_use} payment records",
            detail={"payments": in_use},
        )
    db.delete(category)
    db.commit()
    logger.info("Deleted category %s", category_id)
    return {"message": "Category deleted successfully", "category_id": category_id}


# ── POST /api/categories/{category_id}/form ──────────────────────────────
@router.post("/categories/{category_id}/form", response_model=FormStateResponse)
def reshape_form(
    category_id: int,
    req: FormStateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    category = get_category_or_404(db, category_id)
    required = category.required_fields or []
    values = reshape_fields(required, req.values)
    return FormStateResponse(
        category_id=category.id,
        values=values,
        missing_fields=missing_fields(required, values),
    )
