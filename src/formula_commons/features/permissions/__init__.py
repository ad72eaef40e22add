"""Permissions feature for formula-commons.

Feature-First architecture for the bitwise permission model:
- entities/: flag registry, role table, actor/resource records, protocols
- services/: the authorization engine and permission resolution
- repositories/: asyncpg collaborators and an in-memory approver lookup
- dependencies.py: FastAPI adapters turning denials into 403 responses
"""

from .entities import (
    ALL_PERMISSIONS,
    Actor,
    ApproverLookup,
    AuthorizationContext,
    DEFAULT_ROLE_TABLE,
    PermissionFlag,
    Resource,
    RoleDefinition,
    RoleTable,
    from_legacy_names,
    permission_names,
    role_value,
)
from .services import (
    AuthorizationService,
    add_flag,
    can_access_resource,
    can_approve,
    can_approve_sync,
    can_manage_resource,
    can_view_financial_data,
    filter_financial_fields,
    has_all,
    has_any,
    has_flag,
    remove_flag,
    resolve_permission_set,
)
from .repositories import (
    AsyncPGActorProfileRepository,
    AsyncPGApproverRepository,
    InMemoryApproverLookup,
)

__all__ = [
    # Entities
    "ALL_PERMISSIONS",
    "Actor",
    "ApproverLookup",
    "AuthorizationContext",
    "DEFAULT_ROLE_TABLE",
    "PermissionFlag",
    "Resource",
    "RoleDefinition",
    "RoleTable",
    "from_legacy_names",
    "permission_names",
    "role_value",

    # Engine
    "AuthorizationService",
    "add_flag",
    "can_access_resource",
    "can_approve",
    "can_approve_sync",
    "can_manage_resource",
    "can_view_financial_data",
    "filter_financial_fields",
    "has_all",
    "has_any",
    "has_flag",
    "remove_flag",
    "resolve_permission_set",

    # Repository Implementations
    "AsyncPGActorProfileRepository",
    "AsyncPGApproverRepository",
    "InMemoryApproverLookup",
]
