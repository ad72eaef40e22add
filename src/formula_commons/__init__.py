"""Formula-Commons - bitwise permission model shared by Formula PM services.

Provides the permission flag registry, the role table and the authorization
engine that decides whether an actor may perform a capability on a resource.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    ApprovalType,
    PermissionSettings,
    ProjectAccessType,
    RoleName,
    get_settings,
)

from .core.exceptions import (
    FormulaCommonsError,
    ConfigurationError,
    RoleConfigurationError,
    AuthorizationError,
    UnknownPermissionNameError,
    PermissionDeniedError,
    DatabaseError,
    get_http_status_code,
    create_error_response,
)

from .core.value_objects import ResourceId, UserId

from .features.permissions import (
    ALL_PERMISSIONS,
    Actor,
    AuthorizationContext,
    AuthorizationService,
    DEFAULT_ROLE_TABLE,
    PermissionFlag,
    Resource,
    add_flag,
    can_approve,
    can_manage_resource,
    can_view_financial_data,
    filter_financial_fields,
    has_all,
    has_any,
    has_flag,
    remove_flag,
    role_value,
)

__all__ = [
    "__version__",

    # Configuration
    "ApprovalType",
    "PermissionSettings",
    "ProjectAccessType",
    "RoleName",
    "get_settings",

    # Exceptions
    "FormulaCommonsError",
    "ConfigurationError",
    "RoleConfigurationError",
    "AuthorizationError",
    "UnknownPermissionNameError",
    "PermissionDeniedError",
    "DatabaseError",
    "get_http_status_code",
    "create_error_response",

    # Value objects
    "ResourceId",
    "UserId",

    # Permissions
    "ALL_PERMISSIONS",
    "Actor",
    "AuthorizationContext",
    "AuthorizationService",
    "DEFAULT_ROLE_TABLE",
    "PermissionFlag",
    "Resource",
    "add_flag",
    "can_approve",
    "can_manage_resource",
    "can_view_financial_data",
    "filter_financial_fields",
    "has_all",
    "has_any",
    "has_flag",
    "remove_flag",
    "role_value",
]
