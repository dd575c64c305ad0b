"""
Error taxonomy.

Every error raised by the domain layer derives from ``PayBoxError`` and is
mapped to an HTTP status + JSON body by the handler registered in
``paybox.main``.
"""
from __future__ import annotations

from typing import Any, Optional


class PayBoxError(Exception):
    status_code = 500
    code = "internal_error"
    retryable = False

    def __init__(self, message: str, detail: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> dict[str, Any]:
        body = {"error": self.code, "message": self.message}
        if self.retryable:
            body["retryable"] = True
        body.update(self.detail)
        return body


class ValidationError(PayBoxError):
    """Malformed or incomplete caller input. Never retried."""
    status_code = 400
    code = "validation_error"


class AuthenticationError(PayBoxError):
    status_code = 401
    code = "not_authenticated"


class AuthorizationError(PayBoxError):
    """Role or ownership gate failure."""
    status_code = 403
    code = "forbidden"


class EmptyBatchError(PayBoxError):
    """Nothing pending to export. Benign."""
    status_code = 404
    code = "nothing_to_export"


class ConversionError(PayBoxError):
    """PDF-to-image rendering failed for one file."""
    status_code = 422
    code = "conversion_failed"


class ExternalServiceError(PayBoxError):
    """A downstream HTTP call failed (model endpoint, vendor API, blob store)."""
    status_code = 502
    code = "external_service_error"


class UpstreamTimeoutError(ExternalServiceError):
    status_code = 504
    code = "upstream_timeout"
    retryable = True


class MalformedResponseError(PayBoxError):
    """An external response did not have the expected shape."""
    status_code = 502
    code = "malformed_response"


class ExportCommitError(PayBoxError):
    status_code = 500
    code = "export_commit_failed"
