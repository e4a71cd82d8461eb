"""
Exception definitions for the calculation core.

Business rejections (loan denied, nothing to refund) are NOT exceptions;
they come back as result objects. Exceptions here signal programmer errors
caught at the boundary or inside a test seam:

- InvalidInputError: a value that must have been validated upstream
- RandomSourceExhaustedError: a deterministic random source ran dry
"""

from enum import StrEnum
from typing import Any, Optional


# ============================================================================
# ERROR CODES
# ============================================================================


class ErrorCode(StrEnum):
    """Core error codes."""

    # General errors (1xxx)
    INTERNAL_ERROR = "E1000"
    VALIDATION_ERROR = "E1001"

    # Input errors (2xxx)
    NEGATIVE_VALUE = "E2000"
    OUT_OF_RANGE = "E2001"

    # Seam errors (3xxx)
    RANDOM_SOURCE_EXHAUSTED = "E3000"


# ============================================================================
# EXCEPTIONS
# ============================================================================


class EconomyError(Exception):
    """Base exception for the calculation core."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(EconomyError):
    """Input that the caller was responsible for rejecting."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        details = {"field": field} if field else {}
        super().__init__(message, code=code, details=details)
        self.field = field


class RandomSourceExhaustedError(EconomyError):
    """A SequenceRandomSource was asked for more draws than it holds."""

    def __init__(self, message: str):
        super().__init__(message, code=ErrorCode.RANDOM_SOURCE_EXHAUSTED)


def require_non_negative(name: str, value: float) -> float:
    """Boundary guard: reject negative amounts before they reach a formula."""
    if value < 0:
        raise InvalidInputError(
            f"{name} must be non-negative, got {value}",
            field=name,
            code=ErrorCode.NEGATIVE_VALUE,
        )
    return value


def require_in_range(name: str, value: float, low: float, high: float) -> float:
    """Boundary guard for values with a closed valid range."""
    if not low <= value <= high:
        raise InvalidInputError(
            f"{name} must be between {low:g} and {high:g}, got {value}",
            field=name,
            code=ErrorCode.OUT_OF_RANGE,
        )
    return value
