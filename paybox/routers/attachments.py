"""
Attachment API endpoints.

POST   /api/attachments                         — upload files for a draft record
POST   /api/payments/{id}/attachments           — append files to a record
DELETE /api/payments/{id}/attachments/{index}   — remove one attachment
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user
from paybox.database import get_db
from paybox.dependencies import get_blob_store
from paybox.routers.payments import get_payment_or_404
from paybox.schemas import AttachmentUploadResponse
from paybox.services.attachments import IncomingFile, ingest_files
from paybox.services.permissions import require
from paybox.services.storage import BlobStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _read(files: List[UploadFile]) -> list[IncomingFile]:
    return [
        IncomingFile(
            filename=f.filename or "upload",
            content_type=f.content_type or "",
            data=f.file.read(),
        )
        for f in files
    ]


# ── POST /api/attachments ────────────────────────────────────────────────
@router.post("/attachments", response_model=AttachmentUploadResponse)
def upload_draft_attachments(
    files: List[UploadFile] = File(...),
    existing_count: int = Form(0),
    user: CurrentUser = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    require(user.role, user.stored, "create")
    results = ingest_files(_read(files), store, existing=existing_count)
    logger.info(
        "Draft upload by %s: %d/%d stored",
        user.id, sum(1 for r in results if r.url), len(results),
    )
    return AttachmentUploadResponse(
        results=results,
        attachments=[r.url for r in results if r.url],
    )


# ── POST /api/payments/{payment_id}/attachments ──────────────────────────
@router.post("/payments/{payment_id}/attachments", response_model=AttachmentUploadResponse)
def add_payment_attachments(
    payment_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    payment = get_payment_or_404(db, payment_id)
    require(user.role, user.stored, "edit", actor_id=user.id, owner_id=payment.created_by)

    current = list(payment.attachments or [])
    results = ingest_files(_read(files), store, existing=len(current))
    payment.attachments = current + [r.url for r in results if r.url]
    db.commit()
    logger.info("Payment %s now has %d attachments", payment_id, len(payment.attachments))
    return AttachmentUploadResponse(results=results, attachments=payment.attachments)


# ── DELETE /api/payments/{payment_id}/attachments/{index} ────────────────
@router.delete("/payments/{payment_id}/attachments/{index}")
def delete_payment_attachment(
    payment_id: int,
    index: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    store: BlobStore = Depends(get_blob_store),
):
    payment = get_payment_or_404(db, payment_id)
    require(user.role, user.stored, "edit", actor_id=user.id, owner_id=payment.created_by)

    current = list(payment.attachments or [])
    if index < 0 or index >= len(current):
        raise HTTPException(status_code=404, detail="Attachment not found")

    url = current.pop(index)
    store.delete(url)
    payment.attachments = current
    db.commit()
    logger.info("Removed attachment %d from payment %s", index, payment_id)
    return {"message": "Attachment deleted successfully", "attachments": current}
