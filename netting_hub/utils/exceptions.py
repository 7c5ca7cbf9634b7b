from __future__ import annotations

from typing import Any, Optional

from netting_hub.utils.error_codes import ErrorCode, ERROR_MESSAGES


def _normalize_error_code(value: ErrorCode | str | None) -> ErrorCode:
    if value is None:
        return ErrorCode.E010
    if isinstance(value, ErrorCode):
        return value
    try:
        return ErrorCode(str(value))
    except ValueError:
        return ErrorCode.E010


class NettingException(Exception):
    """Base exception for the netting hub.

    API response format is handled by the global exception handler.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | str = ErrorCode.E010,
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        normalized = _normalize_error_code(code)
        if message is None:
            message = ERROR_MESSAGES.get(normalized, ERROR_MESSAGES[ErrorCode.E010])

        self.message = message
        self.code = normalized.value
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


class BadRequestException(NettingException):
    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code=ErrorCode.E009, details=details, status_code=400)


class TooManyRequestsException(NettingException):
    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message or "Too many requests", code=ErrorCode.E009, details=details, status_code=429)


class TimeoutException(NettingException):
    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code=ErrorCode.E007, details=details, status_code=504)


class AmountOverflowException(BadRequestException):
    """Raised when merging obligations would exceed the unsigned 64-bit range."""


class ExplorationLimitExceeded(NettingException):
    """Raised when cycle enumeration hits its configured work cap.

    This is a resource-exhaustion condition, not a correctness error.
    """

    def __init__(self, message: str | None = None, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code=ErrorCode.E011, details=details, status_code=422)


class NettingInvariantViolation(NettingException):
    """Raised when netting would drive an edge amount below zero.

    Indicates a defect in the calculator, never a legitimate input condition.
    """

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code=ErrorCode.E010, details=details, status_code=500)
