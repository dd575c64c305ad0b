"""
Parse the model's reply into a JSON object.
"""
from __future__ import annotations

import json
import logging
import re

from paybox.errors import MalformedResponseError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_reply(text: str) -> dict:
    """Return the JSON object in ``text``, tolerating a markdown code fence."""
    cleaned = strip_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Could not parse model reply as JSON: %r", text)
        raise MalformedResponseError(
            "Extraction failed, try again or enter the data manually"
        ) from e
    if not isinstance(data, dict):
        logger.error("Model reply is not a JSON object: %r", text)
        raise MalformedResponseError(
            "Extraction failed, try again or enter the data manually"
        )
    return data
