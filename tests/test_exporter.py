"""
Tests for export batching and the Odoo spreadsheet.
"""
import io
from datetime import datetime

import pytest
from openpyxl import load_workbook
from sqlalchemy.exc import OperationalError

from paybox.errors import EmptyBatchError, ExportCommitError
from paybox.models import CategoryModel, PaymentModel, UserProfileModel
from paybox.services import exporter
from paybox.services.exporter import (
    export_stats,
    list_batches,
    mark_exported,
    run_export,
    select_pending,
)
from paybox.services.spreadsheet import export_filename

NOW = datetime(2026, 3, 10, 17, 0, 0)  # naive UTC, 12:00 in Lima


def _clock():
    return NOW


@pytest.fixture()
def seeded(db):
    db.add(CategoryModel(id=1, code="COMB-01", name="Fuel", required_fields=["Vehicle Plate"]))
    db.add(UserProfileModel(id="u1", email="luis@example.com", full_name="Luis Perez", role="user"))
    db.add(UserProfileModel(id="u2", email="rosa@example.com", role="user"))
    db.add_all([
        PaymentModel(
            id=1, paid_at=datetime(2026, 3, 8, 15, 0), payee="Grifo B", amount=80.0,
            currency="soles", category_id=1, created_by="u1", description="Diesel B",
            dynamic_fields={"Vehicle Plate": "ABC-123"},
        ),
        PaymentModel(
            id=2, paid_at=datetime(2026, 3, 2, 15, 0), payee="Grifo A", amount=120.5,
            currency="dolares", category_id=1, created_by="u2",
            dynamic_fields={"Vehicle Plate": "XYZ-789"},
        ),
        PaymentModel(
            id=3, paid_at=datetime(2026, 3, 5, 15, 0), payee="Peaje", amount=5.5,
            currency="soles", category_id=99, created_by="ghost",
        ),
    ])
    db.commit()
    return db


def _sheet_rows(content: bytes):
    ws = load_workbook(io.BytesIO(content)).active
    return ws.title, [list(r) for r in ws.iter_rows(values_only=True)]


class TestRunExport:
    def test_exports_all_pending_oldest_first(self, seeded):
        batch = run_export(seeded, clock=_clock)
        assert batch.count == 3
        assert batch.record_ids == [2, 3, 1]

        title, rows = _sheet_rows(batch.content)
        assert title == "Gastos"
        assert rows[0] == [
            "Empleado", "Descripción", "Fecha del gasto", "Categoría", "Pagado por", "Total",
        ]
        assert rows[1] == [
            "rosa@example.com", "Grifo A", "02/03/2026", "Fuel", "Empleado (a reembolsar)", "120.50",
        ]
        assert rows[2][0] == "Desconocido"
        assert rows[2][3] == "Sin categoría"
        assert rows[3][:2] == ["Luis Perez", "Diesel B"]

    def test_marks_records_with_one_batch(self, seeded):
        batch = run_export(seeded, clock=_clock)
        seeded.expire_all()
        rows = seeded.query(PaymentModel).all()
        assert all(r.exported for r in rows)
        assert {r.batch_id for r in rows} == {batch.batch_id}
        assert all(r.exported_at == NOW for r in rows)
        assert batch.batch_id == 1773162000000  # NOW in epoch milliseconds

    def test_second_run_is_empty(self, seeded):
        run_export(seeded, clock=_clock)
        with pytest.raises(EmptyBatchError):
            run_export(seeded, clock=_clock)

    def test_new_record_goes_to_next_batch(self, seeded):
        first = run_export(seeded, clock=_clock)
        seeded.add(PaymentModel(
            paid_at=datetime(2026, 3, 1, 15, 0), payee="Late", amount=10.0,
            category_id=1, created_by="u1",
        ))
        seeded.commit()
        second = run_export(seeded, clock=_clock)
        assert second.count == 1
        # Same clock reading still yields a strictly larger id
        assert second.batch_id == first.batch_id + 1

    def test_nothing_pending(self, db):
        with pytest.raises(EmptyBatchError):
            run_export(db, clock=_clock)

    def test_partial_commit_rolls_back(self, seeded, monkeypatch):
        monkeypatch.setattr(exporter, "mark_exported", lambda *args: 2)
        with pytest.raises(ExportCommitError) as exc:
            run_export(seeded, clock=_clock)
        assert exc.value.detail["expected"] == 3
        assert exc.value.detail["updated"] == 2
        assert seeded.query(PaymentModel).filter(PaymentModel.exported == True).count() == 0  # noqa: E712

    def test_update_failure_rolls_back(self, seeded, monkeypatch):
        def _locked(*args):
            raise OperationalError("UPDATE payments", {}, Exception("database is locked"))

        monkeypatch.setattr(exporter, "mark_exported", _locked)
        with pytest.raises(ExportCommitError) as exc:
            run_export(seeded, clock=_clock)
        assert exc.value.detail["expected"] == 3
        assert "batch_id" in exc.value.detail
        assert export_stats(seeded).pending == 3

    def test_commit_failure_rolls_back(self, seeded, monkeypatch):
        def _fail():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(seeded, "commit", _fail)
        with pytest.raises(ExportCommitError):
            run_export(seeded, clock=_clock)
        monkeypatch.undo()
        assert export_stats(seeded).pending == 3


class TestMarkExported:
    def test_record_added_after_read_stays_pending(self, seeded):
        captured = [r.id for r in select_pending(seeded)]
        seeded.add(PaymentModel(
            id=4, paid_at=datetime(2026, 3, 9, 15, 0), payee="Late", amount=10.0,
            category_id=1, created_by="u1",
        ))
        seeded.commit()

        updated = mark_exported(seeded, captured, 1773162000000, NOW)
        seeded.commit()
        assert updated == 3

        seeded.expire_all()
        late = seeded.query(PaymentModel).filter(PaymentModel.id == 4).one()
        assert late.exported is False
        assert late.batch_id is None
        assert late.exported_at is None

    def test_already_exported_ids_are_not_claimed_twice(self, seeded):
        captured = [r.id for r in select_pending(seeded)]
        assert mark_exported(seeded, captured, 1, NOW) == 3
        assert mark_exported(seeded, captured, 2, NOW) == 0
        seeded.commit()
        assert {r.batch_id for r in seeded.query(PaymentModel).all()} == {1}


class TestStatsAndBatches:
    def test_stats(self, seeded):
        assert export_stats(seeded).model_dump() == {"pending": 3, "exported": 0, "total": 3}
        run_export(seeded, clock=_clock)
        assert export_stats(seeded).model_dump() == {"pending": 0, "exported": 3, "total": 3}

    def test_batches_total_per_currency(self, seeded):
        batch = run_export(seeded, clock=_clock)
        [summary] = list_batches(seeded)
        assert summary.batch_id == batch.batch_id
        assert summary.record_count == 3
        assert summary.totals == {"soles": 85.5, "dolares": 120.5}


class TestFilename:
    def test_uses_local_date(self):
        # 03:00 UTC on the 11th is still the 10th in Lima
        assert export_filename(datetime(2026, 3, 11, 3, 0), 7) == "Gastos_Odoo_10-03-2026_7_registros.xlsx"
