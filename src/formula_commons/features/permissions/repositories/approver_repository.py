"""Delegated approver relation backed by the project_approvers table.

AsyncPGApproverRepository is an ApproverLookup: the engine calls it with
(actor_id, resource_id, approval_type) only after the role and ownership
checks failed. Query failures surface as DatabaseError and are never turned
into a False decision.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple, Union

import asyncpg

from ....config.constants import ApprovalType, DatabaseTables
from ....config.settings import PermissionSettings, get_settings
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def validate_schema_name(schema: str) -> str:
    """Only plain identifiers are interpolated into SQL."""
    if schema and schema.replace("_", "").isalnum():
        return schema
    raise ValueError(f"Invalid schema name: {schema}")


def _approval_value(approval_type: Union[ApprovalType, str]) -> str:
    return ApprovalType(approval_type).value


class AsyncPGApproverRepository:
    """AsyncPG implementation of the ApproverLookup protocol."""

    def __init__(
        self,
        pool: asyncpg.Pool,
        schema: Optional[str] = None,
        settings: Optional[PermissionSettings] = None,
    ):
        """Initialize with a connection pool and the schema holding project_approvers.

        The schema defaults to ``settings.database_schema``.
        """
        self.pool = pool
        self.settings = settings or get_settings()
        self.schema = validate_schema_name(
            schema if schema is not None else self.settings.database_schema
        )
        self.table = f"{self.schema}.{DatabaseTables.PROJECT_APPROVERS}"

    async def __call__(
        self,
        actor_id: str,
        resource_id: str,
        approval_type: Union[ApprovalType, str],
    ) -> bool:
        return await self.is_approver(actor_id, resource_id, approval_type)

    async def is_approver(
        self,
        actor_id: str,
        resource_id: str,
        approval_type: Union[ApprovalType, str],
    ) -> bool:
        """Check the delegated approver relation with a single query."""
        query = f"""
            SELECT EXISTS (
                SELECT 1 FROM {self.table}
                WHERE project_id = $1 AND user_id = $2 AND approval_type = $3
            )
        """
        kind = _approval_value(approval_type)
        try:
            async with self.pool.acquire() as conn:
                found = await conn.fetchval(
                    query, resource_id, actor_id, kind
                )
        except Exception as e:
            logger.error(f"Failed to check approver {actor_id} on {resource_id}: {e}")
            raise DatabaseError(f"Failed to check project approver: {e}") from e
        return bool(found)

    async def assign(
        self,
        resource_id: str,
        actor_id: str,
        approval_type: Union[ApprovalType, str],
        created_by: Optional[str] = None,
    ) -> None:
        """Designate an approver; assigning twice is a no-op."""
        query = f"""
            INSERT INTO {self.table} (project_id, user_id, approval_type, created_by)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (project_id, user_id, approval_type) DO NOTHING
        """
        kind = _approval_value(approval_type)
        try:
            async with self.pool.acquire() as conn:
                await conn.execute(
                    query, resource_id, actor_id, kind, created_by
                )
        except Exception as e:
            logger.error(f"Failed to assign approver {actor_id} on {resource_id}: {e}")
            raise DatabaseError(f"Failed to assign project approver: {e}") from e
        logger.info(f"Assigned {kind} approver {actor_id} on project {resource_id}")

    async def revoke(
        self,
        resource_id: str,
        actor_id: str,
        approval_type: Union[ApprovalType, str],
    ) -> bool:
        """Remove a designation. Returns True if a row was deleted."""
        query = f"""
            DELETE FROM {self.table}
            WHERE project_id = $1 AND user_id = $2 AND approval_type = $3
        """
        kind = _approval_value(approval_type)
        try:
            async with self.pool.acquire() as conn:
                status = await conn.execute(
                    query, resource_id, actor_id, kind
                )
        except Exception as e:
            logger.error(f"Failed to revoke approver {actor_id} on {resource_id}: {e}")
            raise DatabaseError(f"Failed to revoke project approver: {e}") from e
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return status.split()[-1] != "0"

    async def list_for_project(self, resource_id: str) -> List[Tuple[str, ApprovalType]]:
        """All (user_id, approval_type) designations on a project."""
        query = f"""
            SELECT user_id, approval_type FROM {self.table}
            WHERE project_id = $1
            ORDER BY created_at
        """
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, resource_id)
        except Exception as e:
            logger.error(f"Failed to list approvers for {resource_id}: {e}")
            raise DatabaseError(f"Failed to list project approvers: {e}") from e
        return [(str(row["user_id"]), ApprovalType(row["approval_type"])) for row in rows]


class InMemoryApproverLookup:
    """Set-backed ApproverLookup for tests and local tooling.

    Counts calls so callers can assert the engine consulted it at most once.
    """

    def __init__(self, grants: Iterable[Tuple[str, str, Union[ApprovalType, str]]] = ()):
        self._grants: Set[Tuple[str, str, ApprovalType]] = {
            (str(actor_id), str(resource_id), ApprovalType(kind))
            for actor_id, resource_id, kind in grants
        }
        self.calls = 0

    def grant(self, actor_id: str, resource_id: str, approval_type: Union[ApprovalType, str]) -> None:
        self._grants.add((str(actor_id), str(resource_id), ApprovalType(approval_type)))

    def revoke(self, actor_id: str, resource_id: str, approval_type: Union[ApprovalType, str]) -> None:
        self._grants.discard((str(actor_id), str(resource_id), ApprovalType(approval_type)))

    def __call__(self, actor_id: str, resource_id: str, approval_type: Union[ApprovalType, str]) -> bool:
        self.calls += 1
        return (str(actor_id), str(resource_id), ApprovalType(approval_type)) in self._grants
