"""Application exception hierarchy.

All custom exceptions inherit from HelaError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "INV-1000"
    CONFIGURATION_ERROR = "INV-1001"
    VALIDATION_ERROR = "INV-1002"

    # Classification errors (2xxx)
    RECORD_SHAPE_INVALID = "INV-2001"
    RECORD_VALIDATION_FAILED = "INV-2002"

    # Generative capability errors (3xxx)
    CAPABILITY_UNAVAILABLE = "INV-3000"
    GENERATION_FAILED = "INV-3001"
    GENERATION_TIMEOUT = "INV-3002"
    GENERATION_RATE_LIMIT = "INV-3003"
    GENERATION_MALFORMED = "INV-3004"

    # Record store errors (4xxx)
    RECORD_STORE_ERROR = "INV-4000"
    RECORD_NOT_FOUND = "INV-4001"

    # Vision errors (5xxx)
    VISION_ERROR = "INV-5000"


class HelaError(Exception):
    """Base exception for all inventory core errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(HelaError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(HelaError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class RecordValidationError(HelaError):
    """A classification record broke the category, tag-count or uniqueness rules."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RECORD_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class CapabilityUnavailableError(HelaError):
    """A generative tier cannot run (disabled, unsupported, or no credentials)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CAPABILITY_UNAVAILABLE, details)


class GenerationFailedError(HelaError):
    """A generative tier ran but produced no usable text."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class RecordStoreError(HelaError):
    """Record store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RECORD_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class RecordNotFoundError(RecordStoreError):
    """Requested record does not exist."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.RECORD_NOT_FOUND, details)


class VisionError(HelaError):
    """Vision service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VISION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
