from paybox.schemas.base import (  # noqa: F401
    AttachmentResult,
    AttachmentUploadResponse,
    CategoryCreate,
    CategoryResponse,
    Currency,
    DocumentType,
    ExportBatchSummary,
    ExportStats,
    FormStateRequest,
    FormStateResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
)
from paybox.schemas.ocr import (  # noqa: F401
    Extraction,
    ExtractionWarning,
    InvoiceExtraction,
    OcrRequest,
    OcrResponse,
    OcrResult,
    ReceiptExtraction,
    TokenUsage,
)
from paybox.schemas.users import (  # noqa: F401
    Permissions,
    Role,
    UserCreate,
    UserProfileResponse,
    UserUpdate,
)
