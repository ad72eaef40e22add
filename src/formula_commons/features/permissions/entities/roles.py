"""Role table for formula-commons permissions feature.

A role maps to exactly one permission set. The set is always derived by
OR-ing the role's flag list; the table refuses to build if any derived value
disagrees with an expected literal or touches an unassigned bit.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ....config.constants import ProjectAccessType, RoleName, ROLE_TABLE_VERSION
from ....core.exceptions import RoleConfigurationError
from .flags import ALL_FLAGS, DEFINED_BITS_MASK, PermissionFlag

logger = logging.getLogger(__name__)

F = PermissionFlag


def union_of(flags: Iterable[PermissionFlag]) -> int:
    """OR a collection of flags into a plain integer permission set."""
    value = 0
    for flag in flags:
        value |= int(flag)
    return value


@dataclass(frozen=True)
class RoleDefinition:
    """Immutable role definition: a name bound to a derived permission set."""

    name: RoleName
    display_name: str
    level: int
    flags: Tuple[PermissionFlag, ...]
    default_can_view_costs: bool
    project_access_type: ProjectAccessType
    description: str = ""
    permission_set: int = field(init=False)

    def __post_init__(self):
        """Derive the permission set from the flag list."""
        object.__setattr__(self, 'flags', tuple(self.flags))
        object.__setattr__(self, 'permission_set', union_of(self.flags))

    def grants(self, flag: PermissionFlag) -> bool:
        """Check if the role's permission set contains a flag."""
        return (self.permission_set & int(flag)) != 0

    def __str__(self) -> str:
        return f"Role({self.name.value}={self.permission_set})"


# Flags only an administrator holds
ADMIN_ONLY_FLAGS: Tuple[PermissionFlag, ...] = (
    F.MANAGE_ALL_USERS,
    F.DELETE_DATA,
    F.VIEW_AUDIT_LOGS,
    F.MANAGE_COMPANY_SETTINGS,
    F.BACKUP_RESTORE_DATA,
)

_TECHNICAL_MANAGER_FLAGS = tuple(f for f in ALL_FLAGS if f not in ADMIN_ONLY_FLAGS)

_PROJECT_MANAGER_FLAGS = tuple(
    f for f in _TECHNICAL_MANAGER_FLAGS
    if f not in (F.APPROVE_EXPENSES, F.APPROVE_SHOP_DRAWINGS_CLIENT)
)

DEFAULT_ROLE_DEFINITIONS: Tuple[RoleDefinition, ...] = (
    RoleDefinition(
        name=RoleName.ADMIN,
        display_name="Administrator",
        level=100,
        flags=tuple(ALL_FLAGS),
        default_can_view_costs=True,
        project_access_type=ProjectAccessType.ALL,
        description="Full system access",
    ),
    RoleDefinition(
        name=RoleName.TECHNICAL_MANAGER,
        display_name="Technical Manager",
        level=80,
        flags=_TECHNICAL_MANAGER_FLAGS,
        default_can_view_costs=True,
        project_access_type=ProjectAccessType.ALL,
        description="Everything except user administration, hard delete and company administration",
    ),
    RoleDefinition(
        name=RoleName.PROJECT_MANAGER,
        display_name="Project Manager",
        level=60,
        flags=_PROJECT_MANAGER_FLAGS,
        default_can_view_costs=True,
        project_access_type=ProjectAccessType.ASSIGNED,
        description="Manages projects and teams, sees costs, approves scope, materials and drawings",
    ),
    RoleDefinition(
        name=RoleName.ACCOUNTANT,
        display_name="Accountant",
        level=40,
        flags=(
            F.VIEW_ALL_PROJECTS,
            F.VIEW_FINANCIAL_DATA,
            F.EXPORT_FINANCIAL_REPORTS,
            F.EXPORT_DATA,
        ),
        default_can_view_costs=True,
        project_access_type=ProjectAccessType.ALL,
        description="Financial visibility and reporting across all projects",
    ),
    RoleDefinition(
        name=RoleName.TEAM_MEMBER,
        display_name="Team Member",
        level=30,
        flags=(
            F.VIEW_ASSIGNED_PROJECTS,
            F.VIEW_SHOP_DRAWINGS,
            F.CREATE_TASKS,
            F.EXPORT_DATA,
        ),
        default_can_view_costs=False,
        project_access_type=ProjectAccessType.ASSIGNED,
        description="Basic project access without cost visibility",
    ),
    RoleDefinition(
        name=RoleName.CLIENT,
        display_name="Client",
        level=10,
        flags=(
            F.VIEW_ASSIGNED_PROJECTS,
            F.VIEW_SHOP_DRAWINGS,
            F.APPROVE_SHOP_DRAWINGS_CLIENT,
        ),
        default_can_view_costs=False,
        project_access_type=ProjectAccessType.RESTRICTED,
        description="Limited access to assigned projects only",
    ),
)

# Literals written by the 2025-08-28 bitwise migration. Kept for drift
# reporting only; team_member omits VIEW_SHOP_DRAWINGS and both manager
# values carry admin-only bits.
LEGACY_ROLE_VALUES: Mapping[RoleName, int] = MappingProxyType({
    RoleName.ADMIN: 268435455,
    RoleName.TECHNICAL_MANAGER: 251658239,
    RoleName.PROJECT_MANAGER: 184549375,
    RoleName.TEAM_MEMBER: 4718594,
    RoleName.CLIENT: 34818,
    RoleName.ACCOUNTANT: 4194465,
})


RoleKey = Union[RoleName, str, None]


def _coerce_role_name(role: RoleKey) -> Optional[RoleName]:
    if isinstance(role, RoleName):
        return role
    if not isinstance(role, str):
        return None
    try:
        return RoleName(role.strip().lower())
    except ValueError:
        return None


class RoleTable:
    """Read-only, versioned role -> permission set table.

    Built once and shared; there is no writer after construction, so
    concurrent readers need no locking.
    """

    def __init__(
        self,
        definitions: Iterable[RoleDefinition],
        version: str = ROLE_TABLE_VERSION,
        expected_values: Optional[Mapping[RoleName, int]] = None,
    ):
        roles: Dict[RoleName, RoleDefinition] = {}
        for definition in definitions:
            if definition.name in roles:
                raise RoleConfigurationError(
                    f"Duplicate role definition: {definition.name.value}",
                    [f"{definition.name.value}: defined more than once"],
                )
            roles[definition.name] = definition

        self._roles: Mapping[RoleName, RoleDefinition] = MappingProxyType(roles)
        self._by_value: Mapping[int, RoleName] = MappingProxyType(
            {definition.permission_set: name for name, definition in roles.items()}
        )
        self.version = version
        self.verify(expected_values)

    def verify(self, expected_values: Optional[Mapping[RoleName, int]] = None) -> None:
        """Check every role value against its flag list.

        Raises:
            RoleConfigurationError: listing every inconsistency found
        """
        problems: List[str] = []
        expected_values = expected_values or {}

        for name, definition in self._roles.items():
            derived = union_of(definition.flags)
            if definition.permission_set != derived:
                problems.append(
                    f"{name.value}: value {definition.permission_set} != OR of flags {derived}"
                )
            stray = definition.permission_set & ~DEFINED_BITS_MASK
            if stray:
                problems.append(f"{name.value}: sets unassigned bits {stray:#x}")
            if name in expected_values and expected_values[name] != definition.permission_set:
                problems.append(
                    f"{name.value}: expected {expected_values[name]}, derived {definition.permission_set}"
                )

        if problems:
            logger.error(f"Role table {self.version} failed verification: {problems}")
            raise RoleConfigurationError(
                f"Role table {self.version} is inconsistent with the permission registry",
                problems,
            )

        logger.debug(f"Role table {self.version} verified ({len(self._roles)} roles)")

    def get(self, role: RoleKey) -> Optional[RoleDefinition]:
        """Get a role definition, or None for unknown names."""
        name = _coerce_role_name(role)
        if name is None:
            return None
        return self._roles.get(name)

    def role_value(self, role: RoleKey) -> int:
        """Permission set for a role; unknown roles fail closed to 0."""
        definition = self.get(role)
        if definition is None:
            logger.warning(f"Unknown role {role!r}; resolving to no permissions")
            return 0
        return definition.permission_set

    def role_for_permissions(self, permission_set: int) -> Optional[RoleName]:
        """Exact-match reverse lookup; None for custom permission sets."""
        return self._by_value.get(permission_set)

    def is_at_least_role(self, role: RoleKey, minimum: RoleKey) -> bool:
        """Compare role levels; unknown roles on either side fail closed."""
        actual = self.get(role)
        required = self.get(minimum)
        if actual is None or required is None:
            return False
        return actual.level >= required.level

    def legacy_value_drift(
        self,
        legacy_values: Mapping[RoleName, int] = LEGACY_ROLE_VALUES,
    ) -> Dict[RoleName, Tuple[int, int]]:
        """Roles whose persisted literal differs from the derived value.

        Returns:
            Mapping of role to (legacy literal, derived value)
        """
        drift = {}
        for name, legacy in legacy_values.items():
            definition = self._roles.get(name)
            if definition is not None and definition.permission_set != legacy:
                drift[name] = (legacy, definition.permission_set)
        return drift

    def names(self) -> List[RoleName]:
        """Role names in descending level order."""
        return sorted(self._roles, key=lambda name: self._roles[name].level, reverse=True)

    def __contains__(self, role: object) -> bool:
        return self.get(role) is not None

    def __iter__(self):
        return iter(self._roles.values())

    def __len__(self) -> int:
        return len(self._roles)


DEFAULT_ROLE_TABLE = RoleTable(DEFAULT_ROLE_DEFINITIONS)


def role_value(role: RoleKey) -> int:
    """Permission set for a role in the default table (0 when unknown)."""
    return DEFAULT_ROLE_TABLE.role_value(role)
