"""Permission entities package.

Flag registry, role table, actor/resource records, injected protocols and
the legacy-name boundary mapping.
"""

from .flags import (
    ALL_FLAGS,
    ALL_PERMISSIONS,
    DEFINED_BITS_MASK,
    MAX_PERMISSION_VALUE,
    PermissionFlag,
    decompose,
    flag_by_name,
    is_valid_permission_value,
    permission_names,
)
from .roles import (
    ADMIN_ONLY_FLAGS,
    DEFAULT_ROLE_DEFINITIONS,
    DEFAULT_ROLE_TABLE,
    LEGACY_ROLE_VALUES,
    RoleDefinition,
    RoleTable,
    role_value,
    union_of,
)
from .protocols import ActorProfileSource, ApproverLookup
from .resources import Actor, AuthorizationContext, Resource
from .legacy import LEGACY_PERMISSION_MAP, from_legacy_names, legacy_flag

__all__ = [
    # Registry
    "ALL_FLAGS",
    "ALL_PERMISSIONS",
    "DEFINED_BITS_MASK",
    "MAX_PERMISSION_VALUE",
    "PermissionFlag",
    "decompose",
    "flag_by_name",
    "is_valid_permission_value",
    "permission_names",

    # Roles
    "ADMIN_ONLY_FLAGS",
    "DEFAULT_ROLE_DEFINITIONS",
    "DEFAULT_ROLE_TABLE",
    "LEGACY_ROLE_VALUES",
    "RoleDefinition",
    "RoleTable",
    "role_value",
    "union_of",

    # Protocols
    "ActorProfileSource",
    "ApproverLookup",

    # Records
    "Actor",
    "AuthorizationContext",
    "Resource",

    # Legacy boundary
    "LEGACY_PERMISSION_MAP",
    "from_legacy_names",
    "legacy_flag",
]
