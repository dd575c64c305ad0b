"""
Odoo export endpoints.

POST /api/export           — export all pending records as one spreadsheet batch
GET  /api/export           — pending / exported / total counts
GET  /api/export/batches   — past batches, newest first
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from paybox.auth import CurrentUser, get_current_user
from paybox.database import get_db
from paybox.schemas import ExportBatchSummary, ExportStats
from paybox.services.exporter import export_stats, list_batches, run_export
from paybox.services.permissions import require_privileged
from paybox.services.spreadsheet import XLSX_MEDIA_TYPE

logger = logging.getLogger(__name__)
router = APIRouter()


# ── POST /api/export ─────────────────────────────────────────────────────
@router.post("/export")
def export_batch(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    batch = run_export(db)
    logger.info("Batch %d exported by %s", batch.batch_id, user.id)
    return Response(
        content=batch.content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{batch.filename}"',
            "X-Registros-Exportados": str(batch.count),
            "X-Lote-Id": str(batch.batch_id),
        },
    )


# ── GET /api/export ──────────────────────────────────────────────────────
@router.get("/export", response_model=ExportStats)
def get_export_stats(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return export_stats(db)


# ── GET /api/export/batches ──────────────────────────────────────────────
@router.get("/export/batches", response_model=List[ExportBatchSummary])
def get_export_batches(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    require_privileged(user.role)
    return list_batches(db)
