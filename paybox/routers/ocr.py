"""
OCR endpoint.

POST /api/ocr — classify and extract one uploaded receipt image
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from paybox.auth import CurrentUser, get_current_user
from paybox.dependencies import get_vision_client
from paybox.pipeline import extract_document
from paybox.pipeline.vision import VisionClient
from paybox.schemas import OcrRequest, OcrResponse

router = APIRouter()


# ── POST /api/ocr ────────────────────────────────────────────────────────
@router.post("/ocr", response_model=OcrResponse)
def run_ocr(
    req: OcrRequest,
    user: CurrentUser = Depends(get_current_user),
    client: VisionClient = Depends(get_vision_client),
):
    result = extract_document(req.image_url, client)
    return OcrResponse(success=True, **result.model_dump())
