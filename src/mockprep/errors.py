from __future__ import annotations

from typing import Literal

TokenFailureReason = Literal["invalid_signature", "expired"]


class EngineError(Exception):
    """Base error; ``message`` is safe to show to the caller."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InputValidationError(EngineError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(EngineError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(EngineError):
    status_code = 403
    default_message = "You are not authorised to perform this action"


class NotFoundError(EngineError):
    status_code = 404
    default_message = "Resource not found"


class InternalError(EngineError):
    status_code = 500


class TokenVerificationError(EngineError):
    status_code = 401

    def __init__(self, reason: TokenFailureReason):
        self.reason: TokenFailureReason = reason
        super().__init__(f"interview token rejected: {reason}")
