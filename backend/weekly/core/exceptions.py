"""
Custom exception hierarchy for the weekly update assistant.

Provides structured error handling with error codes, user-facing messages,
and HTTP status code mapping. Inside the tool dispatcher these errors are
turned into result envelopes; only the HTTP layer ever renders them as
error responses.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Validation errors (400)
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    UNKNOWN_SOURCE = "UNKNOWN_SOURCE"
    UNSUPPORTED_SOURCE = "UNSUPPORTED_SOURCE"
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"

    # Connection state (409)
    NOT_CONNECTED = "NOT_CONNECTED"
    DUPLICATE_SOURCE = "DUPLICATE_SOURCE"

    # Resource errors (404)
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_TEMPLATE = "UNKNOWN_TEMPLATE"

    # External service errors (502)
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    VENDOR_REQUEST_FAILED = "VENDOR_REQUEST_FAILED"
    MODEL_API_ERROR = "MODEL_API_ERROR"

    # Timeout errors (504)
    TOOL_TIMEOUT = "TOOL_TIMEOUT"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class AppError(Exception):
    """
    Base application error with structured error information.

    Attributes:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        details: Additional context (not exposed to users in production)
        http_status: HTTP status code for API responses
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        http_status: int = 500,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.http_status = http_status
        super().__init__(message)

    def to_dict(self, include_details: bool = False) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if include_details and self.details:
            result["error"]["details"] = self.details
        return result


# ============ Validation Errors ============


class ValidationError(AppError):
    """Base class for validation errors."""

    def __init__(
        self,
        code: ErrorCode = ErrorCode.INVALID_ARGUMENTS,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code=code, message=message, details=details, http_status=400)


class InvalidArgumentsError(ValidationError):
    """Raised when a tool receives malformed or missing arguments."""

    def __init__(self, tool_name: str, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.INVALID_ARGUMENTS,
            message=f"Invalid arguments for {tool_name}: {reason}",
            details={**(details or {}), "tool_name": tool_name},
        )


class MissingArgumentsError(ValidationError):
    """Raised when required tool arguments are absent."""

    def __init__(self, tool_name: str, missing: List[str]):
        super().__init__(
            code=ErrorCode.INVALID_ARGUMENTS,
            message=f"Missing required argument(s) for {tool_name}: {', '.join(missing)}",
            details={"tool_name": tool_name, "missing": missing},
        )


class UnknownToolError(ValidationError):
    """Raised when the model asks for a tool that is not in the catalog."""

    def __init__(self, tool_name: str):
        super().__init__(
            code=ErrorCode.UNKNOWN_TOOL,
            message=f"Unknown tool: {tool_name}",
            details={"tool_name": tool_name},
        )


class UnknownSourceError(ValidationError):
    """Raised when a source identifier is not in the registry."""

    def __init__(self, source: Any):
        super().__init__(
            code=ErrorCode.UNKNOWN_SOURCE,
            message=f"Invalid data source: {source}",
            details={"source": str(source)},
        )


class UnsupportedSourceError(ValidationError):
    """Raised when a registered source has no connector behind it."""

    def __init__(self, source: str):
        super().__init__(
            code=ErrorCode.UNSUPPORTED_SOURCE,
            message=f"Unsupported data source: {source}",
            details={"source": source},
        )


class ConfigurationMissingError(ValidationError):
    """Raised when a connector's credentials are not configured."""

    def __init__(self, source_name: str, keys: List[str], message: Optional[str] = None):
        super().__init__(
            code=ErrorCode.CONFIGURATION_MISSING,
            message=message
            or f"{source_name} credentials not configured. Please set {_join_keys(keys)} in .env",
            details={"source": source_name, "missing_keys": keys},
        )


def _join_keys(keys: List[str]) -> str:
    if len(keys) <= 1:
        return "".join(keys)
    if len(keys) == 2:
        return f"{keys[0]} and {keys[1]}"
    return f"{', '.join(keys[:-1])}, and {keys[-1]}"


# ============ Connection State Errors ============


class NotConnectedError(AppError):
    """Raised when a read tool is used before the source is connected."""

    def __init__(self, source_name: str):
        super().__init__(
            code=ErrorCode.NOT_CONNECTED,
            message=f"{source_name} is not connected. Please connect to {source_name} first.",
            details={"source": source_name},
            http_status=409,
        )


class DuplicateSourceError(AppError):
    """Raised when a source id is registered twice."""

    def __init__(self, source: str):
        super().__init__(
            code=ErrorCode.DUPLICATE_SOURCE,
            message=f"Data source already registered: {source}",
            details={"source": source},
            http_status=409,
        )


# ============ Resource Not Found Errors ============


class ResourceNotFoundError(AppError):
    """Base class for resource not found errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=code, message=message, details=details, http_status=404)


class SessionNotFoundError(ResourceNotFoundError):
    """Raised when a conversation cannot be found."""

    def __init__(self, session_id: str):
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Chat session not found",
            details={"session_id": session_id[:8] + "..."},
        )


class UnknownTemplateError(ResourceNotFoundError):
    """Raised when a weekly update template id does not exist."""

    def __init__(self, template_id: Any):
        super().__init__(
            code=ErrorCode.UNKNOWN_TEMPLATE,
            message=f"Unknown template: {template_id}",
            details={"template_id": str(template_id)},
        )


# ============ External Service Errors ============


class ExternalServiceError(AppError):
    """Base class for vendor and model API errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=code, message=message, details=details, http_status=502)


class AuthenticationFailedError(ExternalServiceError):
    """Raised when a vendor rejects the configured credentials."""

    def __init__(self, source_name: str, vendor_error: str):
        super().__init__(
            code=ErrorCode.AUTHENTICATION_FAILED,
            message=vendor_error,
            details={"source": source_name},
        )


class VendorRequestFailedError(ExternalServiceError):
    """Raised when a vendor read call fails (network or HTTP error)."""

    def __init__(self, source_name: str, operation: str, original_error: str):
        super().__init__(
            code=ErrorCode.VENDOR_REQUEST_FAILED,
            message=f"Failed to {operation}: {original_error}",
            details={"source": source_name, "operation": operation},
        )


class ModelAPIError(ExternalServiceError):
    """Raised when the model API call fails."""

    def __init__(self, original_error: str):
        super().__init__(
            code=ErrorCode.MODEL_API_ERROR,
            message="AI service temporarily unavailable",
            details={"original_error": original_error},
        )


# ============ Timeout Errors ============


class ToolTimeoutError(AppError):
    """Raised when a vendor call exceeds the connector timeout."""

    def __init__(self, tool_name: str, timeout_seconds: float):
        super().__init__(
            code=ErrorCode.TOOL_TIMEOUT,
            message=f"Tool execution timed out: {tool_name} (after {timeout_seconds:g}s)",
            details={"tool_name": tool_name, "timeout_seconds": timeout_seconds},
            http_status=504,
        )


# ============ Internal Errors ============


class ConfigurationError(AppError):
    """Raised when process-level configuration is unusable."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            details=details,
            http_status=500,
        )
