"""
PayBox OCR pipeline.

Orchestrates: instruction → vision model → parse reply → normalize.
"""
import logging

from paybox.errors import ValidationError
from paybox.pipeline.normalizer import normalize_extraction
from paybox.pipeline.parser import parse_reply
from paybox.pipeline.prompt import build_prompt
from paybox.pipeline.vision import VisionClient
from paybox.schemas import OcrResult

logger = logging.getLogger(__name__)


def extract_document(image_url: str | None, client: VisionClient) -> OcrResult:
    """Run one OCR pass over an uploaded image.

    The result is advisory: it pre-fills a draft and is never persisted.
    """
    if not image_url or not image_url.strip():
        raise ValidationError("An image URL is required")

    logger.info("OCR start — %s", image_url)
    completion = client.complete(build_prompt(), image_url.strip())
    logger.info(
        "OCR tokens: prompt=%d completion=%d total=%d",
        completion.usage.prompt_tokens,
        completion.usage.completion_tokens,
        completion.usage.total_tokens,
    )

    raw = parse_reply(completion.content)
    data, warnings = normalize_extraction(raw)
    logger.info("OCR classified as %s (%d warnings)", data.document_type, len(warnings))

    return OcrResult(
        data=data,
        warnings=warnings,
        raw_response=completion.content,
        tokens=completion.usage,
    )
