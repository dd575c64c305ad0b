"""
Odoo expense import spreadsheet.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from paybox.dates import format_local_date, to_local

SHEET_TITLE = "Gastos"
PAID_BY_EMPLOYEE = "Empleado (a reembolsar)"
UNKNOWN_USER = "Desconocido"
UNCATEGORIZED = "Sin categoría"

# (header, width in characters)
COLUMNS: list[tuple[str, int]] = [
    ("Empleado", 25),
    ("Descripción", 50),
    ("Fecha del gasto", 15),
    ("Categoría", 20),
    ("Pagado por", 25),
    ("Total", 15),
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class ExpenseRow:
    employee: str
    description: str
    paid_at: datetime
    category: str
    amount: float

    def cells(self) -> list[str]:
        return [
            self.employee,
            self.description,
            format_local_date(self.paid_at),
            self.category,
            PAID_BY_EMPLOYEE,
            f"{self.amount:.2f}",
        ]


def render_workbook(rows: Iterable[ExpenseRow]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append([header for header, _ in COLUMNS])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append(row.cells())

    for idx, (_, width) in enumerate(COLUMNS, 1):
        ws.column_dimensions[get_column_letter(idx)].width = width

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def export_filename(exported_at: datetime, count: int) -> str:
    return f"Gastos_Odoo_{to_local(exported_at).strftime('%d-%m-%Y')}_{count}_registros.xlsx"
