# src/homework_gateway/errors.py
"""
Gateway error taxonomy.

Every failure the pipeline can produce is a GatewayError subclass carrying
its transport status, its enumerated code and the fixed sentence the caller
sees. Diagnostic detail (raw upstream text, parse errors) rides along in
`detail` and only ever reaches the log.
"""
from __future__ import annotations

from typing import Optional, Tuple

from homework_gateway.models import ErrorBody


class GatewayError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred."

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None, detail: Optional[str] = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        self.detail = detail
        super().__init__(self.message)


# --- Client errors (always 4xx, detected before any upstream call) ----------

class ClientError(GatewayError):
    status_code = 400


class UnsupportedMediaType(ClientError):
    status_code = 400
    code = "UNSUPPORTED_MEDIA_TYPE"
    message = "Content-Type must be application/json"


class PayloadTooLarge(ClientError):
    status_code = 413
    code = "PAYLOAD_TOO_LARGE"
    message = "Request payload too large"


class MalformedRequest(ClientError):
    status_code = 400
    code = "MALFORMED_REQUEST"
    message = "Request body must be valid JSON"


class ValidationFailed(ClientError):
    """One violated validation rule; code and message name the rule."""
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Invalid request"


# --- Upstream errors ---------------------------------------------------------

class RateLimited(GatewayError):
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"
    message = "Rate limit exceeded. Please try again later."


class PaymentRequired(GatewayError):
    status_code = 402
    code = "PAYMENT_REQUIRED"
    message = "Payment required. Please add credits to your workspace."


class UpstreamTimeout(GatewayError):
    status_code = 504
    code = "TIMEOUT"
    message = "The AI service took too long to respond."


class UpstreamError(GatewayError):
    status_code = 503
    code = "AI_SERVICE_ERROR"
    message = "The AI service is temporarily unavailable."


# --- Internal errors ---------------------------------------------------------

class InternalError(GatewayError):
    pass


def for_upstream_status(status: int, detail: str) -> GatewayError:
    """Classify a non-success upstream HTTP status."""
    if status == 429:
        return RateLimited(detail=detail)
    if status == 402:
        return PaymentRequired(detail=detail)
    return UpstreamError(detail=detail)


def to_error_body(exc: BaseException) -> Tuple[int, ErrorBody]:
    """
    Map any exception to (status, body). Anything that is not a
    GatewayError is unanticipated and becomes a generic 500.
    """
    if not isinstance(exc, GatewayError):
        exc = InternalError()
    return exc.status_code, ErrorBody(error=exc.message, code=exc.code)
