"""Configuration for formula-commons: constants, settings and logging."""

from .constants import (
    ApprovalType,
    DatabaseTables,
    DEFAULT_COST_FIELDS,
    PermissionColumns,
    PERMISSION_BIT_WIDTH,
    ProjectAccessType,
    ROLE_TABLE_VERSION,
    RoleName,
)
from .logging_config import LoggingConfig, get_logger, setup_logging
from .settings import PermissionSettings, get_settings

__all__ = [
    # Constants
    "ApprovalType",
    "DatabaseTables",
    "DEFAULT_COST_FIELDS",
    "PermissionColumns",
    "PERMISSION_BIT_WIDTH",
    "ProjectAccessType",
    "ROLE_TABLE_VERSION",
    "RoleName",

    # Logging
    "LoggingConfig",
    "get_logger",
    "setup_logging",

    # Settings
    "PermissionSettings",
    "get_settings",
]
