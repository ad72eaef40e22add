"""Base exceptions for formula-commons.

All exceptions inherit from FormulaCommonsError and carry an error code,
structured details, and an HTTP status mapping for API responses.

Authorization denials are not exceptions: the engine returns False and the
routing layer decides how to answer.
"""

from typing import Any, Dict, Optional


class FormulaCommonsError(Exception):
    """Base exception for all formula-commons errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: FormulaCommonsError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The formula-commons exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
