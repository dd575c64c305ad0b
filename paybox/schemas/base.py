"""
paybox-contracts — request/response models for categories, payments and
export batches.

All API layers produce and consume these Pydantic v2 models.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Currency(str, Enum):
    SOLES = "soles"
    DOLARES = "dolares"


class DocumentType(str, Enum):
    INVOICE = "invoice"
    RECEIPT = "receipt"


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CategoryBase(BaseModel):
    code: str = Field(..., min_length=1, description="Short text code, e.g. COMB-01")
    name: str = Field(..., min_length=1)
    nature: Optional[str] = None
    subgroup: Optional[str] = None
    cost_center: Optional[str] = None
    required_fields: list[str] = Field(default_factory=list)

    @field_validator("required_fields")
    @classmethod
    def _clean_field_names(cls, v: list[str]) -> list[str]:
        cleaned: list[str] = []
        for name in v:
            name = name.strip()
            if not name:
                raise ValueError("required field names must not be empty")
            if name in cleaned:
                raise ValueError(f"duplicate required field: {name}")
            cleaned.append(name)
        return cleaned


class CategoryCreate(CategoryBase):
    pass


class CategoryResponse(CategoryBase):
    id: int
    created_at: Optional[datetime] = None


class FormStateRequest(BaseModel):
    """Dynamic values currently held by an in-progress payment form."""
    values: dict[str, str] = Field(default_factory=dict)


class FormStateResponse(BaseModel):
    category_id: int
    values: dict[str, str]
    missing_fields: list[str]


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

class PaymentBase(BaseModel):
    paid_at: datetime
    payee: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    currency: Currency = Currency.SOLES
    payment_method: Optional[str] = None
    bank_account: Optional[str] = None
    document_type: Optional[DocumentType] = None
    tax_id: Optional[str] = None
    document_number: Optional[str] = None
    description: Optional[str] = None
    category_id: int
    dynamic_fields: dict[str, str] = Field(default_factory=dict)


class PaymentCreate(PaymentBase):
    attachments: list[str] = Field(default_factory=list)


class PaymentUpdate(PaymentBase):
    pass


class PaymentResponse(BaseModel):
    id: int
    paid_at: datetime
    payee: str
    amount: float
    currency: Currency
    payment_method: str
    bank_account: Optional[str] = None
    document_type: Optional[DocumentType] = None
    tax_id: Optional[str] = None
    document_number: Optional[str] = None
    description: Optional[str] = None
    category_id: int
    category_name: Optional[str] = None
    dynamic_fields: dict[str, str]
    attachments: list[str]
    created_by: str
    uploaded_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    exported: bool
    exported_at: Optional[datetime] = None
    batch_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

class ExportStats(BaseModel):
    pending: int
    exported: int
    total: int


class ExportBatchSummary(BaseModel):
    batch_id: int
    exported_at: Optional[datetime] = None
    record_count: int
    totals: dict[str, float] = Field(
        default_factory=dict, description="Sum of amounts per currency"
    )


# ---------------------------------------------------------------------------
# Attachments
# ---------------------------------------------------------------------------

class AttachmentResult(BaseModel):
    filename: str
    url: Optional[str] = None
    error: Optional[str] = None


class AttachmentUploadResponse(BaseModel):
    results: list[AttachmentResult]
    attachments: list[str] = Field(
        default_factory=list, description="Attachment URLs after the upload"
    )
