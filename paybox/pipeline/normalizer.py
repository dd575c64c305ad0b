"""
Normalize the model's loosely-typed answer into an invoice or receipt
extraction.

Each rule is a small pure function so the form and the OCR path share them.
"""
from __future__ import annotations

import re
from typing import Any, Optional

from paybox.config import settings
from paybox.schemas import (
    Currency,
    ExtractionWarning,
    InvoiceExtraction,
    ReceiptExtraction,
)

DEFAULT_PAYMENT_METHOD = "Efectivo"

# (substring, canonical label); first hit wins
PAYMENT_METHOD_KEYWORDS: list[tuple[str, str]] = [
    ("yape", "Yape"),
    ("plin", "Plin"),
    ("transferencia", "Transferencia"),
    ("transfer", "Transferencia"),
    ("tarjeta", "Tarjeta"),
    ("card", "Tarjeta"),
    ("efectivo", "Efectivo"),
    ("cash", "Efectivo"),
]


def normalize_payment_method(method: Any) -> str:
    if method is None:
        return DEFAULT_PAYMENT_METHOD
    text = str(method).strip()
    if not text:
        return DEFAULT_PAYMENT_METHOD
    lowered = text.lower()
    for keyword, label in PAYMENT_METHOD_KEYWORDS:
        if keyword in lowered:
            return label
    return text[0].upper() + text[1:].lower()


def normalize_currency(value: Any) -> Currency:
    if isinstance(value, str) and value.strip().lower() == Currency.DOLARES.value:
        return Currency.DOLARES
    return Currency.SOLES


def parse_amount(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = re.sub(r"[^\d.,\-]", "", str(value)).strip(".,")
    if "," in text and "." in text:
        # Whichever separator comes last is the decimal one
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif re.search(r"^[^,]*,\d{1,2}$", text):
        text = text.replace(",", ".")
    else:
        text = text.replace(",", "")
    try:
        return float(text) if text else None
    except ValueError:
        return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def check_own_tax_id(tax_id: Optional[str]) -> ExtractionWarning | None:
    """The organization's own tax id as issuer means bill-to and issuer were confused."""
    if tax_id and tax_id.strip() == settings.ORG_TAX_ID:
        return ExtractionWarning(
            code="own_tax_id",
            message=(
                f"The detected tax id belongs to {settings.ORG_NAME}, the customer. "
                "Check that the payee is the party that ISSUED the invoice."
            ),
        )
    return None


def normalize_extraction(
    raw: dict,
) -> tuple[InvoiceExtraction | ReceiptExtraction, list[ExtractionWarning]]:
    """Map the model's JSON answer to one of the two extraction variants."""
    common = dict(
        date=_text(raw.get("fecha")),
        payee=_text(raw.get("beneficiario")),
        amount=parse_amount(raw.get("monto")),
        currency=normalize_currency(raw.get("moneda")),
        payment_method=normalize_payment_method(raw.get("metodo_pago")),
        document_number=_text(raw.get("numero_factura")) or _text(raw.get("numero_operacion")),
        description=_text(raw.get("descripcion")),
    )

    warnings: list[ExtractionWarning] = []
    if raw.get("tipo_documento") == "factura":
        extraction = InvoiceExtraction(tax_id=_text(raw.get("ruc")), **common)
        warning = check_own_tax_id(extraction.tax_id)
        if warning is not None:
            warnings.append(warning)
        return extraction, warnings

    return ReceiptExtraction(time=_text(raw.get("hora")), **common), warnings
