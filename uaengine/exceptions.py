"""Custom exceptions for the UA engine.

Provides structured error handling with categorized exceptions
and a standardized error response format shared by the HTTP layer.
"""

from typing import Optional, Dict, Any


class UAEngineException(Exception):
    """Base exception for all uaengine errors.

    Provides structured error response format with:
    - error_code: Machine-readable error identifier
    - message: Human-readable error description
    - details: Optional additional context
    """

    error_code: str = "UAENGINE_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Return structured error response dict."""
        response = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


# ============ Validation Errors (4xx) ============


class ValidationError(UAEngineException):
    """Input validation failed."""

    error_code = "VALIDATION_ERROR"
    status_code = 400


class InvalidPluginError(ValidationError):
    """Plugin object does not expose callable ``test`` and ``parse``."""

    error_code = "INVALID_PLUGIN"

    def __init__(self, plugin: Any, missing: str):
        super().__init__(
            f"Plugin {plugin!r} has no callable '{missing}'",
            details={"plugin": repr(plugin), "missing": missing},
        )


class InvalidRangeError(ValidationError):
    """Range expression does not follow ``<browser> <op> <version>``."""

    error_code = "INVALID_RANGE"

    def __init__(self, expression: str):
        super().__init__(f"Invalid version range format: {expression}", details={"range": expression})


# ============ Comparison Errors ============


class IncomparableBrowsersError(UAEngineException):
    """Two UAs belong to different browser families."""

    error_code = "INCOMPARABLE_BROWSERS"
    status_code = 409

    def __init__(self, left: str, right: str):
        super().__init__(
            f"Cannot compare versions across browser families: {left} vs {right}",
            details={"left": left, "right": right},
        )


# ============ Generation Errors ============


class GenerationError(UAEngineException):
    """UA string generation failed."""

    error_code = "GENERATION_ERROR"


class UnsupportedPlatformError(GenerationError):
    """No builder renders the requested browser/OS pair."""

    error_code = "UNSUPPORTED_PLATFORM"

    def __init__(self, os_name: str, browser_name: str = ""):
        if browser_name:
            message = f"{browser_name} cannot be rendered on {os_name}"
        else:
            message = f"No UA builder for OS: {os_name}"
        super().__init__(message, details={"os": os_name, "browser": browser_name})


# ============ Configuration Errors ============


class ConfigurationError(UAEngineException):
    """Configuration issue."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, message: str):
        super().__init__(f"Configuration error for {setting}: {message}", details={"setting": setting})


# ============ Utility Functions ============


def error_response(exception: UAEngineException) -> tuple:
    """Create Flask JSON response from exception.

    Returns:
        Tuple of (response_dict, status_code) ready for jsonify
    """
    return exception.to_dict(), exception.status_code
