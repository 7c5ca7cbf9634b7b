from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Standard netting hub error codes."""

    E007 = "E007"  # Timeout: Operation timeout
    E009 = "E009"  # Validation: Invalid input
    E010 = "E010"  # Internal: Internal error
    E011 = "E011"  # Resources: Exploration limit exceeded


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.E007: "Operation timeout",
    ErrorCode.E009: "Validation error",
    ErrorCode.E010: "Internal server error",
    ErrorCode.E011: "Exploration limit exceeded",
}
