"""
Payment record with embedded export state.
"""
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)

from paybox.dates import utcnow
from paybox.database import Base


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    paid_at = Column(DateTime, nullable=False, index=True)
    payee = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String, nullable=False, default="soles")  # soles | dolares
    payment_method = Column(String, nullable=False, default="Efectivo")
    bank_account = Column(String)

    # OCR-derived
    document_type = Column(String)  # invoice | receipt
    tax_id = Column(String)
    document_number = Column(String)
    description = Column(Text)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    dynamic_fields = Column(JSON, nullable=False, default=dict)
    attachments = Column(JSON, nullable=False, default=list)

    created_by = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Export state: exported iff exported_at and batch_id are both set
    exported = Column(Boolean, nullable=False, default=False, index=True)
    exported_at = Column(DateTime)
    batch_id = Column(BigInteger, index=True)
