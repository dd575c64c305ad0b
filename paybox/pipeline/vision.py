"""
Client for an OpenAI-compatible vision chat-completions endpoint.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from paybox.config import settings
from paybox.errors import (
    ExternalServiceError,
    MalformedResponseError,
    UpstreamTimeoutError,
)
from paybox.schemas import TokenUsage

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    content: str
    usage: TokenUsage


class VisionClient:
    """Sends one user turn (instruction + image URL) and returns the reply text."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "VisionClient":
        return cls(
            base_url=settings.LLM_BASE_URL,
            api_key=settings.LLM_API_KEY,
            model=settings.LLM_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT_SECONDS,
        )

    def complete(self, prompt: str, image_url: str) -> Completion:
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                    ],
                }
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    f"{self.base_url}/chat/completions", json=payload, headers=headers
                )
        except httpx.TimeoutException as e:
            logger.warning("Vision model timed out after %.0fs", self.timeout)
            raise UpstreamTimeoutError(
                "The extraction service took too long to answer, try again"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Vision model request failed: %s", e)
            raise ExternalServiceError("Could not reach the extraction service") from e

        if not response.is_success:
            logger.error(
                "Vision model error: %s - %s", response.status_code, response.text[:200]
            )
            raise ExternalServiceError(
                "The extraction service returned an error",
                detail={"upstream_status": response.status_code},
            )

        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected vision model payload: %s", response.text[:500])
            raise MalformedResponseError("Extraction failed, try again or enter the data manually") from e

        if not content:
            raise MalformedResponseError("Extraction failed, try again or enter the data manually")

        usage = body.get("usage") or {}
        return Completion(
            content=content,
            usage=TokenUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            ),
        )
