"""Resolution of an actor's final permission set from stored profile columns.

The engine only ever sees a single resolved integer. This module owns the
"stored value, else legacy names, else role default, then per-actor cost
override" precedence so that no decision function has to know about it.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from ....config.constants import PermissionColumns
from ..entities.flags import PermissionFlag
from ..entities.legacy import from_legacy_names
from ..entities.resources import Actor
from ..entities.roles import DEFAULT_ROLE_TABLE, RoleKey, RoleTable
from .engine import add_flag, remove_flag

logger = logging.getLogger(__name__)


def apply_cost_override(permission_set: int, can_view_costs: Optional[bool]) -> int:
    """Apply the nullable per-actor financial visibility override.

    None keeps the value as is; True/False force VIEW_FINANCIAL_DATA on/off.
    """
    if can_view_costs is None:
        return permission_set
    if can_view_costs:
        return add_flag(permission_set, PermissionFlag.VIEW_FINANCIAL_DATA)
    return remove_flag(permission_set, PermissionFlag.VIEW_FINANCIAL_DATA)


def resolve_permission_set(
    role: RoleKey,
    permissions_bitwise: Optional[int] = None,
    can_view_costs: Optional[bool] = None,
    legacy_permissions: Optional[Iterable[str]] = None,
    role_table: RoleTable = DEFAULT_ROLE_TABLE,
    strict_legacy_names: bool = False,
) -> int:
    """Resolve the permission set handed to the engine.

    Args:
        role: Stored role name; unknown names contribute nothing
        permissions_bitwise: Stored integer, used when not None
        can_view_costs: Nullable cost visibility override
        legacy_permissions: Pre-bitwise permission names, used when no
            integer is stored
        role_table: Table supplying role defaults
        strict_legacy_names: Raise on unmapped legacy names

    Returns:
        Final permission set (0 when nothing resolves)
    """
    if permissions_bitwise is not None:
        base = int(permissions_bitwise)
    elif legacy_permissions:
        base = from_legacy_names(legacy_permissions, strict=strict_legacy_names)
    else:
        base = role_table.role_value(role)

    if base < 0:
        logger.warning(f"Negative permission value {base} for role {role!r}; failing closed")
        base = 0

    return apply_cost_override(base, can_view_costs)


def actor_from_profile(
    profile: Mapping[str, Any],
    role_table: RoleTable = DEFAULT_ROLE_TABLE,
    strict_legacy_names: bool = False,
) -> Actor:
    """Build an Actor from a user_profiles row or equivalent mapping."""
    permission_set = resolve_permission_set(
        role=profile.get(PermissionColumns.ROLE),
        permissions_bitwise=profile.get(PermissionColumns.PERMISSIONS_BITWISE),
        can_view_costs=profile.get(PermissionColumns.CAN_VIEW_COSTS),
        legacy_permissions=profile.get(PermissionColumns.LEGACY_PERMISSIONS),
        role_table=role_table,
        strict_legacy_names=strict_legacy_names,
    )
    return Actor(id=profile["id"], permission_set=permission_set)
