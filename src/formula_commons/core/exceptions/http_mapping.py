"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .auth import (
    AuthorizationError,
    ConfigurationError,
    PermissionDeniedError,
    RoleConfigurationError,
    UnknownPermissionNameError,
)
from .base import FormulaCommonsError
from .database import DatabaseError, QueryError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    UnknownPermissionNameError: 400,

    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,

    # 500 Internal Server Error
    ConfigurationError: 500,
    RoleConfigurationError: 500,
    DatabaseError: 500,
    QueryError: 500,
    FormulaCommonsError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception, walking the class hierarchy.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code, 500 for anything unmapped
    """
    for exc_type in type(exception).__mro__:
        if exc_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_type]
    return 500
