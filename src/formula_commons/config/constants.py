"""Constants and enums for formula-commons.

These correspond to the enums and CHECK constraints defined in the
platform migrations (user_profiles.role, project_approvers.approval_type).
"""

from enum import Enum
from typing import Final, Tuple


class DatabaseTables:
    """Table names consumed by the permission repositories."""

    USER_PROFILES: Final[str] = "user_profiles"
    PROJECT_APPROVERS: Final[str] = "project_approvers"


class PermissionColumns:
    """Columns on user_profiles that carry permission state."""

    PERMISSIONS_BITWISE: Final[str] = "permissions_bitwise"
    CAN_VIEW_COSTS: Final[str] = "can_view_costs"
    ROLE: Final[str] = "role"
    LEGACY_PERMISSIONS: Final[str] = "permissions"


class RoleName(str, Enum):
    """User roles - corresponds to user_profiles.role."""

    ADMIN = "admin"
    TECHNICAL_MANAGER = "technical_manager"
    PROJECT_MANAGER = "project_manager"
    TEAM_MEMBER = "team_member"
    CLIENT = "client"
    ACCOUNTANT = "accountant"


class ProjectAccessType(str, Enum):
    """How broadly a role sees projects."""

    ALL = "all"
    ASSIGNED = "assigned"
    RESTRICTED = "restricted"


class ApprovalType(str, Enum):
    """Approval types - corresponds to project_approvers.approval_type."""

    SHOP_DRAWINGS = "shop_drawings"
    MATERIAL_SPECS = "material_specs"
    SCOPE_CHANGES = "scope_changes"


# Record fields holding cost information, stripped for actors without
# financial visibility
DEFAULT_COST_FIELDS: Final[Tuple[str, ...]] = (
    "unit_cost",
    "total_cost",
    "actual_cost",
    "budget",
    "cost",
    "price",
)

# Bits 0-27 are assigned; 28 and above are reserved
PERMISSION_BIT_WIDTH: Final[int] = 28

ROLE_TABLE_VERSION: Final[str] = "2025-08-28"
