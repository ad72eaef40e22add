"""Permission services: the bitwise engine and its orchestration."""

from .engine import (
    APPROVAL_FLAGS,
    add_flag,
    can_access_resource,
    can_approve,
    can_approve_sync,
    can_edit_costs,
    can_manage_resource,
    can_view_financial_data,
    filter_financial_fields,
    filter_financial_record,
    has_all,
    has_any,
    has_flag,
    holds_approval_flag,
    is_admin,
    remove_flag,
)
from .effective_permissions import (
    actor_from_profile,
    apply_cost_override,
    resolve_permission_set,
)
from .authorization_service import AuthorizationService

__all__ = [
    # Engine
    "APPROVAL_FLAGS",
    "add_flag",
    "can_access_resource",
    "can_approve",
    "can_approve_sync",
    "can_edit_costs",
    "can_manage_resource",
    "can_view_financial_data",
    "filter_financial_fields",
    "filter_financial_record",
    "has_all",
    "has_any",
    "has_flag",
    "holds_approval_flag",
    "is_admin",
    "remove_flag",

    # Resolution
    "actor_from_profile",
    "apply_cost_override",
    "resolve_permission_set",

    # Orchestration
    "AuthorizationService",
]
