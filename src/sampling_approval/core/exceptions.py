"""
Custom Exceptions for Sampling Approval
=======================================

Structured error handling lets hosts react to failures by type rather
than by parsing strings.

Error Codes:
- 1xxx: Client errors (malformed payloads, wrong request variant)
- 3xxx: Resource errors (permission service unreachable)
- 5xxx: System errors (configuration, unexpected)
"""

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Structured error codes for user-friendly messages"""

    # 1xxx: Client Errors
    VALIDATION_ERROR = 1001
    UNKNOWN_ACTION_TYPE = 1002

    # 3xxx: Resource Errors
    CONFIRMATION_FAILED = 3001

    # 5xxx: System Errors
    INTERNAL_ERROR = 5001
    CONFIGURATION_ERROR = 5003


class SamplingApprovalError(Exception):
    """Base exception for all sampling approval errors"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': int(self.error_code),
            'message': self.message,
            'details': self.details
        }

    def user_message(self) -> str:
        """Get user-friendly error message based on error code"""
        code_messages = {
            ErrorCode.VALIDATION_ERROR: "Invalid approval request",
            ErrorCode.UNKNOWN_ACTION_TYPE: "Unsupported approval request type",
            ErrorCode.CONFIRMATION_FAILED: "Permission service unavailable",
            ErrorCode.INTERNAL_ERROR: "Internal error",
            ErrorCode.CONFIGURATION_ERROR: "Configuration error",
        }
        return f"Error {self.error_code}: {code_messages.get(self.error_code, self.message)}"


class ValidationError(SamplingApprovalError):
    """Raised when an inbound payload is malformed or handed to the wrong coordinator"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class UnknownActionTypeError(SamplingApprovalError):
    """Raised when no coordinator is registered for an action type"""

    def __init__(self, action_type: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"No coordinator registered for action type {action_type!r}",
            ErrorCode.UNKNOWN_ACTION_TYPE,
            details,
        )
        self.action_type = action_type


class ConfirmationError(SamplingApprovalError):
    """Raised when a confirmation cannot be delivered to the permission service"""

    def __init__(self, request_id: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIRMATION_FAILED, details)
        self.request_id = request_id


class ConfigurationError(SamplingApprovalError):
    """Raised when settings fail validation"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)
