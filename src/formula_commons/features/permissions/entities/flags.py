"""Permission flag registry for formula-commons permissions feature.

Each capability owns exactly one bit of the permission set stored in
user_profiles.permissions_bitwise. Values are literal so that a refactor of
this module can never renumber a stored bit. Bits 28 and above are reserved.
"""

import operator
from enum import IntFlag
from functools import reduce
from typing import Final, List

from ....config.constants import PERMISSION_BIT_WIDTH


class PermissionFlag(IntFlag):
    """Capability flags, one bit each."""

    # Project management (bits 0-4)
    VIEW_ALL_PROJECTS = 1
    VIEW_ASSIGNED_PROJECTS = 2
    CREATE_PROJECTS = 4
    MANAGE_ALL_PROJECTS = 8
    ARCHIVE_PROJECTS = 16

    # Financial controls (bits 5-7)
    VIEW_FINANCIAL_DATA = 32
    APPROVE_EXPENSES = 64
    EXPORT_FINANCIAL_REPORTS = 128

    # Scope and materials (bits 8-10)
    MANAGE_SCOPE = 256
    APPROVE_SCOPE_CHANGES = 512
    MANAGE_MATERIALS = 1024

    # Shop drawings (bits 11-15)
    VIEW_SHOP_DRAWINGS = 2048
    CREATE_SHOP_DRAWINGS = 4096
    EDIT_SHOP_DRAWINGS = 8192
    APPROVE_SHOP_DRAWINGS = 16384          # internal approval
    APPROVE_SHOP_DRAWINGS_CLIENT = 32768   # client approval

    # User management (bits 16-18)
    VIEW_ALL_USERS = 65536
    MANAGE_TEAM_MEMBERS = 131072
    MANAGE_ALL_USERS = 262144

    # Tasks and workflow (bits 19-21)
    CREATE_TASKS = 524288
    EDIT_TASKS = 1048576
    ASSIGN_TASKS = 2097152

    # Data management (bits 22-24)
    EXPORT_DATA = 4194304
    IMPORT_DATA = 8388608
    DELETE_DATA = 16777216

    # Admin functions (bits 25-27)
    VIEW_AUDIT_LOGS = 33554432
    MANAGE_COMPANY_SETTINGS = 67108864
    BACKUP_RESTORE_DATA = 134217728


ALL_FLAGS: Final[List[PermissionFlag]] = list(PermissionFlag)

ALL_PERMISSIONS: Final[int] = reduce(operator.or_, (int(flag) for flag in ALL_FLAGS), 0)

# Bits the engine will ever consider; anything outside is inert
DEFINED_BITS_MASK: Final[int] = ALL_PERMISSIONS

MAX_PERMISSION_VALUE: Final[int] = (1 << PERMISSION_BIT_WIDTH) - 1


def flag_by_name(name: str) -> PermissionFlag | None:
    """Look up a flag by its registry name (case-insensitive)."""
    try:
        return PermissionFlag[name.upper()]
    except KeyError:
        return None


def is_valid_permission_value(value: int) -> bool:
    """Check that a stored value fits inside the assigned bit range.

    Diagnostic only: the engine ignores out-of-range bits rather than
    rejecting the value.
    """
    return isinstance(value, int) and 0 <= value <= MAX_PERMISSION_VALUE


def permission_names(permission_set: int) -> List[str]:
    """Human-readable names of the defined flags present, in bit order."""
    if not isinstance(permission_set, int):
        return []
    return [
        flag.name.lower().replace("_", " ")
        for flag in ALL_FLAGS
        if permission_set & int(flag)
    ]


def decompose(permission_set: int) -> List[PermissionFlag]:
    """Split a permission set into its defined flags, in bit order."""
    if not isinstance(permission_set, int):
        return []
    return [flag for flag in ALL_FLAGS if permission_set & int(flag)]
