"""Exception hierarchy for formula-commons."""

from .base import FormulaCommonsError, create_error_response
from .auth import (
    AuthorizationError,
    ConfigurationError,
    PermissionDeniedError,
    RoleConfigurationError,
    UnknownPermissionNameError,
)
from .database import DatabaseError, QueryError
from .http_mapping import HTTP_STATUS_MAP, get_http_status_code

__all__ = [
    # Base
    "FormulaCommonsError",

    # Configuration / authorization
    "ConfigurationError",
    "RoleConfigurationError",
    "AuthorizationError",
    "UnknownPermissionNameError",
    "PermissionDeniedError",

    # Database
    "DatabaseError",
    "QueryError",

    # Utility Functions
    "HTTP_STATUS_MAP",
    "get_http_status_code",
    "create_error_response",
]
