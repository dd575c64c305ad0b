"""
Payment record API endpoints.

GET    /api/payments          — list records (filter by export state / category)
GET    /api/payments/{id}     — get one record
POST   /api/payments          — create record
PUT    /api/payments/{id}     — update record (creator or admin/developer)
DELETE /api/payments/{id}     — delete record and its attachments
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user
from paybox.config import settings
from paybox.database import get_db
from paybox.dates import to_storage, utcnow
from paybox.dependencies import get_blob_store
from paybox.errors import ExternalServiceError, ValidationError
from paybox.models import CategoryModel, PaymentModel, UserProfileModel
from paybox.pipeline.normalizer import normalize_payment_method
from paybox.schemas import (
    DocumentType,
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
)
from paybox.services.exporter import display_name
from paybox.services.fields import reshape_fields, validate_fields
from paybox.services.permissions import require
from paybox.services.storage import BlobStore

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_payment(
    model: PaymentModel,
    category_name: Optional[str] = None,
    uploaded_by: Optional[str] = None,
) -> PaymentResponse:
    return PaymentResponse(
        id=model.id,
        paid_at=model.paid_at,
        payee=model.payee,
        amount=model.amount,
        currency=model.currency,
        payment_method=model.payment_method,
        bank_account=model.bank_account,
        document_type=model.document_type,
        tax_id=model.tax_id,
        document_number=model.document_number,
        description=model.description,
        category_id=model.category_id,
        category_name=category_name,
        dynamic_fields=model.dynamic_fields or {},
        attachments=model.attachments or [],
        created_by=model.created_by,
        uploaded_by=uploaded_by,
        created_at=model.created_at,
        updated_at=model.updated_at,
        exported=model.exported,
        exported_at=model.exported_at,
        batch_id=model.batch_id,
    )


def get_payment_or_404(db: Session, payment_id: int) -> PaymentModel:
    row = db.query(PaymentModel).filter(PaymentModel.id == payment_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Payment not found")
    return row


def _category_for(db: Session, category_id: int) -> CategoryModel:
    category = db.query(CategoryModel).filter(CategoryModel.id == category_id).first()
    if not category:
        raise ValidationError(f"Unknown category: {category_id}")
    return category


def _apply(model: PaymentModel, req: PaymentCreate | PaymentUpdate, dynamic: dict[str, str]) -> None:
    is_invoice = req.document_type == DocumentType.INVOICE
    model.paid_at = to_storage(req.paid_at)
    model.payee = req.payee.strip()
    model.amount = req.amount
    model.currency = req.currency.value
    model.payment_method = normalize_payment_method(req.payment_method)
    model.bank_account = req.bank_account or None
    model.document_type = req.document_type.value if req.document_type else None
    model.tax_id = (req.tax_id or None) if is_invoice else None
    model.document_number = req.document_number or None
    model.description = req.description or None
    model.category_id = req.category_id
    model.dynamic_fields = dynamic


def _describe(db: Session, model: PaymentModel) -> PaymentResponse:
    category = db.query(CategoryModel).filter(CategoryModel.id == model.category_id).first()
    profile = db.query(UserProfileModel).filter(UserProfileModel.id == model.created_by).first()
    return transform_payment(
        model,
        category_name=category.name if category else None,
        uploaded_by=display_name(profile),
    )


# ── GET /api/payments ────────────────────────────────────────────────────
@router.get("/payments", response_model=List[PaymentResponse])
def list_payments(
    exported: Optional[bool] = None,
    category_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    query = db.query(PaymentModel)
    if exported is not None:
        query = query.filter(PaymentModel.exported == exported)
    if category_id is not None:
        query = query.filter(PaymentModel.category_id == category_id)
    rows = query.order_by(PaymentModel.paid_at.desc(), PaymentModel.id.desc()).all()

    categories = {c.id: c.name for c in db.query(CategoryModel).all()}
    users = {
        u.id: display_name(u)
        for u in db.query(UserProfileModel)
        .filter(UserProfileModel.id.in_({r.created_by for r in rows}))
        .all()
    }
    logger.info("Found %d payments", len(rows))
    return [
        transform_payment(
            r,
            category_name=categories.get(r.category_id),
            uploaded_by=users.get(r.created_by, display_name(None)),
        )
        for r in rows
    ]


# ── GET /api/payments/{payment_id} ───────────────────────────────────────
@router.get("/payments/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return _describe(db, get_payment_or_404(db, payment_id))


# ── POST /api/payments ───────────────────────────────────────────────────
@router.post("/payments", response_model=PaymentResponse)
def create_payment(
    req: PaymentCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require(user.role, user.stored, "create")
    category = _category_for(db, req.category_id)
    dynamic = validate_fields(category.required_fields or [], req.dynamic_fields)
    if len(req.attachments) > settings.MAX_ATTACHMENTS:
        raise ValidationError(f"At most {settings.MAX_ATTACHMENTS} attachments are allowed per record")

    payment = PaymentModel(
        created_by=user.id,
        attachments=list(req.attachments),
        exported=False,
    )
    _apply(payment, req, dynamic)
    db.add(payment)
    db.commit()
    logger.info("Stored payment %s (category=%s, by=%s)", payment.id, category.code, user.id)
    return _describe(db, payment)


# ── PUT /api/payments/{payment_id} ───────────────────────────────────────
@router.put("/payments/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    req: PaymentUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    payment = get_payment_or_404(db, payment_id)
    require(user.role, user.stored, "edit", actor_id=user.id, owner_id=payment.created_by)

    category = _category_for(db, req.category_id)
    required = category.required_fields or []
    if req.category_id != payment.category_id:
        # Keep values still required, start new ones empty, drop the rest
        values = reshape_fields(required, {**(payment.dynamic_fields or {}), **req.dynamic_fields})
    else:
        values = req.dynamic_fields
    dynamic = validate_fields(required, values)

    _apply(payment, req, dynamic)
    payment.updated_at = utcnow()
    db.commit()
    logger.info("Updated payment %s", payment_id)
    return _describe(db, payment)


# ── DELETE /api/payments/{payment_id} ────────────────────────────────────
@router.delete("/payments/{payment_id}")
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    payment = get_payment_or_404(db, payment_id)
    require(user.role, user.stored, "delete", actor_id=user.id, owner_id=payment.created_by)

    urls = list(payment.attachments or [])
    db.delete(payment)
    db.commit()
    logger.info("Deleted payment %s", payment_id)

    # The record is gone; a blob that fails to delete is only orphaned
    for url in urls:
        try:
            store.delete(url)
        except ExternalServiceError as e:
            logger.warning("Orphaned attachment %s: %s", url, e.message)
    return {"message": "Payment deleted successfully", "payment_id": payment_id}
