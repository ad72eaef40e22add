"""Boundary conversion from legacy string permissions to bitwise flags.

Older profiles stored a list of permission names. They are converted to a
permission set here, once, when the record is read; nothing past this module
ever branches on a permission string.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from ....core.exceptions import UnknownPermissionNameError
from .flags import PermissionFlag

logger = logging.getLogger(__name__)

F = PermissionFlag

LEGACY_PERMISSION_MAP: Mapping[str, PermissionFlag] = MappingProxyType({
    # Projects
    "view_projects": F.VIEW_ASSIGNED_PROJECTS,
    "create_projects": F.CREATE_PROJECTS,
    "edit_projects": F.MANAGE_ALL_PROJECTS,
    "delete_projects": F.DELETE_DATA,
    "edit_project_settings": F.MANAGE_ALL_PROJECTS,
    "view_project_costs": F.VIEW_FINANCIAL_DATA,
    "assign_project_team": F.MANAGE_TEAM_MEMBERS,

    # Scope
    "view_scope": F.VIEW_ASSIGNED_PROJECTS,
    "manage_scope_items": F.MANAGE_SCOPE,
    "assign_subcontractors": F.MANAGE_SCOPE,
    "approve_scope_changes": F.APPROVE_SCOPE_CHANGES,
    "export_scope_excel": F.EXPORT_DATA,

    # Shop drawings
    "view_drawings": F.VIEW_SHOP_DRAWINGS,
    "upload_drawings": F.CREATE_SHOP_DRAWINGS,
    "internal_review_drawings": F.EDIT_SHOP_DRAWINGS,
    "client_review_drawings": F.APPROVE_SHOP_DRAWINGS_CLIENT,
    "approve_shop_drawings": F.APPROVE_SHOP_DRAWINGS,

    # Material specs
    "view_materials": F.VIEW_ASSIGNED_PROJECTS,
    "create_material_specs": F.MANAGE_MATERIALS,
    "approve_material_specs": F.MANAGE_MATERIALS,

    # Tasks
    "view_tasks": F.VIEW_ASSIGNED_PROJECTS,
    "create_tasks": F.CREATE_TASKS,
    "assign_tasks": F.ASSIGN_TASKS,
    "edit_tasks": F.EDIT_TASKS,

    # Financial
    "view_all_costs": F.VIEW_FINANCIAL_DATA,
    "approve_expenses": F.APPROVE_EXPENSES,
    "generate_financial_reports": F.EXPORT_FINANCIAL_REPORTS,
    "export_data": F.EXPORT_DATA,

    # Admin
    "manage_users": F.MANAGE_ALL_USERS,
    "manage_company_settings": F.MANAGE_COMPANY_SETTINGS,
    "view_audit_logs": F.VIEW_AUDIT_LOGS,
    "backup_restore": F.BACKUP_RESTORE_DATA,

    # Client portal
    "client_portal_access": F.VIEW_ASSIGNED_PROJECTS,
    "submit_feedback": F.VIEW_ASSIGNED_PROJECTS,
    "approve_drawings_client": F.APPROVE_SHOP_DRAWINGS_CLIENT,
})


def legacy_flag(name: str) -> PermissionFlag | None:
    """Bitwise flag for one legacy name, or None if unmapped."""
    return LEGACY_PERMISSION_MAP.get(name.strip().lower()) if isinstance(name, str) else None


def from_legacy_names(names: Iterable[str] | None, strict: bool = False) -> int:
    """Convert a stored list of legacy permission names to a permission set.

    Args:
        names: Legacy names as persisted on the profile
        strict: Raise on unmapped names instead of skipping them

    Raises:
        UnknownPermissionNameError: strict mode and a name has no mapping
    """
    permission_set = 0
    for name in names or ():
        flag = legacy_flag(name)
        if flag is None:
            if strict:
                raise UnknownPermissionNameError(str(name))
            logger.warning(f"Skipping unknown legacy permission: {name!r}")
            continue
        permission_set |= int(flag)
    return permission_set
