"""
OCR extraction result: a tagged union of invoice and receipt shapes.
"""
from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from paybox.schemas.base import Currency


class ExtractionWarning(BaseModel):
    code: str
    message: str


class _ExtractionBase(BaseModel):
    date: Optional[str] = Field(None, description="YYYY-MM-DD")
    payee: Optional[str] = None
    amount: Optional[float] = None
    currency: Currency = Currency.SOLES
    payment_method: str = "Efectivo"
    document_number: Optional[str] = None
    description: Optional[str] = None


class InvoiceExtraction(_ExtractionBase):
    document_type: Literal["invoice"] = "invoice"
    tax_id: Optional[str] = None


class ReceiptExtraction(_ExtractionBase):
    document_type: Literal["receipt"] = "receipt"
    time: Optional[str] = Field(None, description="HH:MM")


Extraction = Annotated[
    Union[InvoiceExtraction, ReceiptExtraction],
    Field(discriminator="document_type"),
]


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class OcrRequest(BaseModel):
    image_url: Optional[str] = None


class OcrResult(BaseModel):
    data: Extraction
    warnings: list[ExtractionWarning] = Field(default_factory=list)
    raw_response: str = ""
    tokens: TokenUsage = Field(default_factory=TokenUsage)


class OcrResponse(OcrResult):
    success: bool = True
