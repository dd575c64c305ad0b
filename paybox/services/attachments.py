"""
Attachment ingestion: PDF → first-page image, then upload.

Files are handled independently; one bad file never aborts the others.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import fitz  # PyMuPDF

from paybox.config import settings
from paybox.errors import ConversionError, PayBoxError, ValidationError
from paybox.schemas import AttachmentResult
from paybox.services.storage import BlobStore

logger = logging.getLogger(__name__)


@dataclass
class IncomingFile:
    filename: str
    content_type: str
    data: bytes


def is_pdf(f: IncomingFile) -> bool:
    return f.content_type == "application/pdf" or f.filename.lower().endswith(".pdf")


def is_image(f: IncomingFile) -> bool:
    return (f.content_type or "").startswith("image/")


def pdf_first_page_to_jpeg(data: bytes, scale: float) -> bytes:
    """Render page 1 of a PDF to JPEG bytes at ``scale``× resolution."""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.page_count == 0:
                raise ConversionError("The PDF has no pages")
            pix = doc[0].get_pixmap(matrix=fitz.Matrix(scale, scale))
            return pix.tobytes("jpeg")
    except ConversionError:
        raise
    except Exception as e:
        logger.warning("PDF conversion failed: %s", e)
        raise ConversionError("Could not convert the PDF to an image") from e


def check_capacity(existing: int, incoming: int, maximum: int | None = None) -> None:
    maximum = settings.MAX_ATTACHMENTS if maximum is None else maximum
    if existing + incoming > maximum:
        remaining = max(maximum - existing, 0)
        raise ValidationError(
            f"At most {maximum} attachments are allowed per record "
            f"({remaining} remaining, {incoming} received)",
            detail={"max_attachments": maximum, "remaining": remaining},
        )


def _prepare(f: IncomingFile) -> tuple[bytes, str, str]:
    """Return ``(data, content_type, extension)`` ready for upload."""
    if len(f.data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File exceeds {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB"
        )
    if is_pdf(f):
        return pdf_first_page_to_jpeg(f.data, settings.PDF_RENDER_SCALE), "image/jpeg", "jpg"
    if is_image(f):
        ext = os.path.splitext(f.filename)[1].lstrip(".") or f.content_type.split("/")[-1]
        return f.data, f.content_type, ext
    raise ValidationError("Only images and PDF files are accepted")


def ingest_files(
    files: list[IncomingFile], store: BlobStore, existing: int = 0
) -> list[AttachmentResult]:
    """Convert and upload each file; results keep the input order."""
    check_capacity(existing, len(files))

    results: list[AttachmentResult] = []
    for f in files:
        try:
            data, content_type, ext = _prepare(f)
            url = store.upload(data, content_type, ext)
        except PayBoxError as e:
            logger.warning("Attachment %s skipped: %s", f.filename, e.message)
            results.append(AttachmentResult(filename=f.filename, error=e.message))
            continue
        results.append(AttachmentResult(filename=f.filename, url=url))
    return results
