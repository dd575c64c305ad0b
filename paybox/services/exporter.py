"""
Export batching: pending payments → spreadsheet → marked exported.

A record moves PENDING → EXPORTED exactly once. The commit is a single
UPDATE keyed by the ids captured at read time, so a record that turns
pending after the read waits for the next run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from paybox.dates import utcnow
from paybox.errors import EmptyBatchError, ExportCommitError
from paybox.models import CategoryModel, PaymentModel, UserProfileModel
from paybox.schemas import ExportBatchSummary, ExportStats
from paybox.services.spreadsheet import (
    UNCATEGORIZED,
    UNKNOWN_USER,
    ExpenseRow,
    export_filename,
    render_workbook,
)

logger = logging.getLogger(__name__)


@dataclass
class ExportBatch:
    batch_id: int
    exported_at: datetime
    record_ids: list[int]
    content: bytes
    filename: str

    @property
    def count(self) -> int:
        return len(self.record_ids)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def select_pending(db: Session) -> list[PaymentModel]:
    """Pending records, oldest payment first."""
    return (
        db.query(PaymentModel)
        .filter(PaymentModel.exported == False)  # noqa: E712
        .order_by(PaymentModel.paid_at.asc(), PaymentModel.id.asc())
        .all()
    )


def display_name(profile: Optional[UserProfileModel]) -> str:
    if profile is None:
        return UNKNOWN_USER
    return profile.full_name or profile.email or UNKNOWN_USER


def build_rows(db: Session, records: list[PaymentModel]) -> list[ExpenseRow]:
    user_ids = {r.created_by for r in records}
    category_ids = {r.category_id for r in records}

    users = {
        u.id: display_name(u)
        for u in db.query(UserProfileModel).filter(UserProfileModel.id.in_(user_ids)).all()
    }
    categories = {
        c.id: c.name
        for c in db.query(CategoryModel).filter(CategoryModel.id.in_(category_ids)).all()
    }

    return [
        ExpenseRow(
            employee=users.get(r.created_by, UNKNOWN_USER),
            description=r.description or r.payee,
            paid_at=r.paid_at,
            category=categories.get(r.category_id, UNCATEGORIZED),
            amount=r.amount,
        )
        for r in records
    ]


def next_batch_id(db: Session, now: datetime) -> int:
    """Millisecond timestamp, bumped past the last batch if the clock lags."""
    candidate = int(now.replace(tzinfo=timezone.utc).timestamp() * 1000)
    last = db.query(func.max(PaymentModel.batch_id)).scalar()
    if last is not None and candidate <= last:
        candidate = last + 1
    return candidate


def mark_exported(
    db: Session, record_ids: list[int], batch_id: int, exported_at: datetime
) -> int:
    """One conditional UPDATE over the captured ids. Returns the affected row count."""
    updated = (
        db.query(PaymentModel)
        .filter(PaymentModel.id.in_(record_ids), PaymentModel.exported == False)  # noqa: E712
        .update(
            {
                PaymentModel.exported: True,
                PaymentModel.exported_at: exported_at,
                PaymentModel.batch_id: batch_id,
            },
            synchronize_session=False,
        )
    )
    return updated


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def run_export(db: Session, clock: Callable[[], datetime] = utcnow) -> ExportBatch:
    """Export every pending record as one batch.

    Raises ``EmptyBatchError`` when nothing is pending and
    ``ExportCommitError`` when the commit did not claim every captured record;
    in both cases no file is produced for the caller.
    """
    records = select_pending(db)
    if not records:
        logger.info("Export requested with no pending records")
        raise EmptyBatchError("There are no records pending export")

    record_ids = [r.id for r in records]
    rows = build_rows(db, records)
    content = render_workbook(rows)

    now = clock()
    batch_id = next_batch_id(db, now)
    try:
        updated = mark_exported(db, record_ids, batch_id, now)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Export batch %d failed during update", batch_id)
        raise ExportCommitError(
            "Could not mark the records as exported",
            detail={"batch_id": batch_id, "expected": len(record_ids)},
        ) from e

    if updated != len(record_ids):
        db.rollback()
        logger.error(
            "Export batch %d claimed %d of %d records, rolled back",
            batch_id, updated, len(record_ids),
        )
        raise ExportCommitError(
            "Could not mark the records as exported",
            detail={"batch_id": batch_id, "expected": len(record_ids), "updated": updated},
        )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Export batch %d failed during commit", batch_id)
        raise ExportCommitError(
            "Could not mark the records as exported",
            detail={"batch_id": batch_id, "expected": len(record_ids)},
        ) from e
    logger.info("Export batch %d: %d records", batch_id, updated)

    return ExportBatch(
        batch_id=batch_id,
        exported_at=now,
        record_ids=record_ids,
        content=content,
        filename=export_filename(now, len(record_ids)),
    )


def export_stats(db: Session) -> ExportStats:
    pending = db.query(PaymentModel).filter(PaymentModel.exported == False).count()  # noqa: E712
    exported = db.query(PaymentModel).filter(PaymentModel.exported == True).count()  # noqa: E712
    return ExportStats(pending=pending, exported=exported, total=pending + exported)


def list_batches(db: Session) -> list[ExportBatchSummary]:
    rows = (
        db.query(
            PaymentModel.batch_id,
            PaymentModel.currency,
            func.count(PaymentModel.id),
            func.sum(PaymentModel.amount),
            func.max(PaymentModel.exported_at),
        )
        .filter(PaymentModel.exported == True)  # noqa: E712
        .group_by(PaymentModel.batch_id, PaymentModel.currency)
        .all()
    )

    batches: dict[int, ExportBatchSummary] = {}
    for batch_id, currency, count, total, exported_at in rows:
        summary = batches.setdefault(
            batch_id, ExportBatchSummary(batch_id=batch_id, exported_at=exported_at, record_count=0)
        )
        summary.record_count += count
        summary.totals[currency] = round(float(total or 0), 2)
    return sorted(batches.values(), key=lambda b: b.batch_id, reverse=True)
