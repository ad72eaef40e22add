"""AsyncPG-based actor profile repository.

Reads the permission columns of user_profiles and resolves them into the
Actor the engine consumes. Never cached: each request reads fresh columns.
"""

import logging
from typing import Optional

import asyncpg

from ....config.constants import DatabaseTables, PermissionColumns
from ....config.settings import PermissionSettings, get_settings
from ....core.exceptions import DatabaseError
from ..entities.resources import Actor
from ..entities.roles import DEFAULT_ROLE_TABLE, RoleTable
from ..services.effective_permissions import actor_from_profile
from .approver_repository import validate_schema_name

logger = logging.getLogger(__name__)


class AsyncPGActorProfileRepository:
    """AsyncPG implementation of ActorProfileSource.

    Schema and legacy-name strictness default to the values in
    PermissionSettings.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        schema: Optional[str] = None,
        role_table: RoleTable = DEFAULT_ROLE_TABLE,
        strict_legacy_names: Optional[bool] = None,
        settings: Optional[PermissionSettings] = None,
    ):
        self.pool = pool
        self.settings = settings or get_settings()
        self.schema = validate_schema_name(
            schema if schema is not None else self.settings.database_schema
        )
        self.table = f"{self.schema}.{DatabaseTables.USER_PROFILES}"
        self.role_table = role_table
        self.strict_legacy_names = (
            strict_legacy_names
            if strict_legacy_names is not None
            else self.settings.strict_legacy_names
        )

    async def get_permission_columns(self, actor_id: str) -> Optional[dict]:
        """Fetch id, role, permissions_bitwise, can_view_costs and the legacy
        permissions array for a profile."""
        query = f"""
            SELECT id, role, permissions_bitwise, can_view_costs, permissions
            FROM {self.table}
            WHERE id = $1
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, actor_id)
        except Exception as e:
            logger.error(f"Failed to load permission columns for {actor_id}: {e}")
            raise DatabaseError(f"Failed to load user profile: {e}") from e

        if row is None:
            return None
        profile = dict(row)
        profile["id"] = str(profile["id"])
        return profile

    async def get_actor(self, actor_id: str) -> Optional[Actor]:
        """Resolved Actor for a profile, or None when the profile is missing."""
        profile = await self.get_permission_columns(actor_id)
        if profile is None:
            logger.debug(f"No profile found for actor {actor_id}")
            return None
        if (
            profile.get(PermissionColumns.PERMISSIONS_BITWISE) is None
            and profile.get(PermissionColumns.LEGACY_PERMISSIONS)
        ):
            logger.info(f"Resolving actor {actor_id} from legacy permission names")
        return actor_from_profile(
            profile,
            role_table=self.role_table,
            strict_legacy_names=self.strict_legacy_names,
        )
