"""
Error handling for the proxy compiler.

Provides structured errors with error codes so per-event failures can be
reported without aborting a whole compilation pass.
"""

from typing import Any, Dict, Optional


class ProxyError(Exception):
    """
    Compiler error with error code and message.

    Raised for a single event; the method compiler collects them into its
    report instead of stopping.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the compile report."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.details,
        }


class ErrorCode:
    """Standard error codes for the compiler."""

    # Input errors
    INVALID_EVENT = "INVALID_EVENT"
    UNSUPPORTED_ACTION = "UNSUPPORTED_ACTION"

    # Key resolution (reported as a warning, the key is treated as absent)
    UNRESOLVED_KEY_SPEC = "UNRESOLVED_KEY_SPEC"

    # Output map errors
    LOGICAL_ID_COLLISION = "LOGICAL_ID_COLLISION"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


def handle_error(error: Exception) -> Dict[str, Any]:
    """
    Convert exception to standardized error report entry.

    Args:
        error: Exception to handle

    Returns:
        Error dictionary for the compile report
    """
    if isinstance(error, ProxyError):
        return error.to_dict()

    return {
        "errorCode": ErrorCode.INTERNAL_ERROR,
        "message": f"Unexpected error while compiling event: {error}",
    }
