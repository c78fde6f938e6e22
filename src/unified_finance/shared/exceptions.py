"""
Unified Finance Exception Hierarchy

Provides specific exception types for every failure the request pipeline can
surface, each carrying a stable machine-readable ErrorCode, enabling proper
error classification and handling downstream.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Stable error codes exposed to callers.

    Each member carries a numeric id, a default message and whether a caller
    may reasonably retry the operation later.
    """

    # 2000s: Authentication errors
    AUTHENTICATION_FAILED = (2001, "Authentication failed.", False)
    CRUMB_ACQUISITION_FAILED = (2002, "Failed to acquire anti-forgery token.", False)

    # 3000s: Rate limiting errors
    RATE_LIMIT_EXCEEDED = (3001, "Rate limit exceeded.", True)

    # 4000s: Data errors
    DATA_NOT_FOUND = (4001, "Requested data not found.", False)
    INVALID_SYMBOL = (4002, "Invalid symbol.", False)

    # 5000s: Parsing errors
    JSON_PARSING_ERROR = (5001, "JSON parsing error occurred.", False)
    DATA_PARSING_ERROR = (5010, "Data parsing error occurred.", False)

    # 6000s: Parameter errors
    INVALID_PARAMETER = (6001, "Invalid parameter.", False)

    # 7000s: Upstream errors
    EXTERNAL_API_ERROR = (7004, "External API error occurred.", True)
    NETWORK_ERROR = (7005, "Network error occurred.", True)

    # 9000s: Other errors
    CONFIGURATION_ERROR = (9002, "Configuration error occurred.", False)

    def __init__(self, number: int, default_message: str, retryable: bool):
        self.number = number
        self.default_message = default_message
        self.retryable = retryable


class UfcError(Exception):
    """Base exception for all unified-finance errors."""

    default_code = ErrorCode.EXTERNAL_API_ERROR

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        self.error_code = error_code or self.default_code
        self.message = message or self.error_code.default_message
        self.metadata = metadata or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Machine-readable code, e.g. ``DATA_NOT_FOUND``."""
        return self.error_code.name

    @property
    def retryable(self) -> bool:
        return self.error_code.retryable

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "number": self.error_code.number,
            "message": self.message,
            "metadata": self.metadata,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidInputError(UfcError):
    """Caller supplied a malformed argument; raised before any network activity."""

    default_code = ErrorCode.INVALID_PARAMETER

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: ErrorCode | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, metadata)
        self.field = field


class AuthenticationError(UfcError):
    """Session or token could not be obtained, or was rejected after a retry."""

    default_code = ErrorCode.AUTHENTICATION_FAILED


class ApiError(UfcError):
    """Non-2xx response or transport failure talking to an upstream provider."""

    default_code = ErrorCode.EXTERNAL_API_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body_preview: str | None = None,
        error_code: ErrorCode | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, metadata)
        self.status_code = status_code
        self.body_preview = body_preview

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class DataParsingError(UfcError):
    """Body was not valid JSON or did not have the expected shape."""

    default_code = ErrorCode.DATA_PARSING_ERROR


class DataNotFoundError(UfcError):
    """Well-formed response that carried an error or no results."""

    default_code = ErrorCode.DATA_NOT_FOUND


class ConfigurationError(UfcError):
    """Client is not configured for the requested operation."""

    default_code = ErrorCode.CONFIGURATION_ERROR
