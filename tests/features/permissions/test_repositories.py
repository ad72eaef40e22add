"""
Tests for the asyncpg repositories.
"""

from uuid import uuid4

import pytest

from formula_commons.config.constants import ApprovalType, RoleName
from formula_commons.config.settings import PermissionSettings
from formula_commons.core.exceptions import DatabaseError, UnknownPermissionNameError
from formula_commons.features.permissions.entities import (
    ActorProfileSource,
    ApproverLookup,
    PermissionFlag,
    from_legacy_names,
)
from formula_commons.features.permissions.repositories import (
    AsyncPGActorProfileRepository,
    AsyncPGApproverRepository,
)
from formula_commons.features.permissions.repositories.approver_repository import (
    validate_schema_name,
)
from formula_commons.features.permissions.services import engine


class TestProtocolConformance:

    def test_repositories_satisfy_protocols(self, fake_pool, approver_lookup):
        assert isinstance(AsyncPGApproverRepository(fake_pool), ApproverLookup)
        assert isinstance(approver_lookup, ApproverLookup)
        assert isinstance(AsyncPGActorProfileRepository(fake_pool), ActorProfileSource)


class TestSchemaValidation:

    @pytest.mark.parametrize("schema", ["public", "tenant_42"])
    def test_valid(self, schema):
        assert validate_schema_name(schema) == schema

    @pytest.mark.parametrize("schema", ["", "public; DROP TABLE x", "a.b"])
    def test_invalid(self, schema, fake_pool):
        with pytest.raises(ValueError):
            validate_schema_name(schema)
        with pytest.raises(ValueError):
            AsyncPGApproverRepository(fake_pool, schema=schema)


class TestApproverRepository:

    @pytest.fixture
    def repository(self, fake_pool):
        return AsyncPGApproverRepository(fake_pool, schema="formula")

    def test_schema_defaults_to_settings(self, fake_pool):
        settings = PermissionSettings(_env_file=None, database_schema="tenant_a")
        repository = AsyncPGApproverRepository(fake_pool, settings=settings)
        assert repository.table == "tenant_a.project_approvers"

    @pytest.mark.asyncio
    async def test_is_approver(self, repository, mock_connection, actor_id):
        mock_connection.fetchval.return_value = True

        assert await repository.is_approver(actor_id, "p-1", ApprovalType.MATERIAL_SPECS)

        query, *params = mock_connection.fetchval.call_args.args
        assert "formula.project_approvers" in query
        assert params == ["p-1", actor_id, "material_specs"]

    @pytest.mark.asyncio
    async def test_call_delegates_to_is_approver(self, repository, mock_connection, fake_pool, actor_id):
        mock_connection.fetchval.return_value = False
        assert await repository(actor_id, "p-1", "scope_changes") is False
        assert fake_pool.acquired == 1

    @pytest.mark.asyncio
    async def test_query_failure_raises_database_error(self, repository, mock_connection, actor_id):
        mock_connection.fetchval.side_effect = OSError("connection reset")
        with pytest.raises(DatabaseError) as exc_info:
            await repository.is_approver(actor_id, "p-1", "shop_drawings")
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_database_error_propagates_through_engine(
        self, repository, mock_connection, role_sets, foreign_project, actor_id
    ):
        mock_connection.fetchval.side_effect = OSError("connection reset")
        with pytest.raises(DatabaseError):
            await engine.can_approve(
                role_sets[RoleName.CLIENT],
                foreign_project,
                actor_id,
                ApprovalType.SHOP_DRAWINGS,
                repository,
            )

    @pytest.mark.asyncio
    async def test_engine_grants_through_repository(
        self, repository, mock_connection, foreign_project, actor_id
    ):
        mock_connection.fetchval.return_value = True
        assert await engine.can_approve(
            int(PermissionFlag.APPROVE_SCOPE_CHANGES),
            foreign_project,
            actor_id,
            "scope_changes",
            repository,
        )
        mock_connection.fetchval.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_assign(self, repository, mock_connection, actor_id):
        await repository.assign("p-1", actor_id, "shop_drawings", created_by="u-admin")
        query, *params = mock_connection.execute.call_args.args
        assert "ON CONFLICT" in query
        assert params == ["p-1", actor_id, "shop_drawings", "u-admin"]

    @pytest.mark.parametrize("tag, expected", [("DELETE 1", True), ("DELETE 0", False)])
    @pytest.mark.asyncio
    async def test_revoke(self, repository, mock_connection, actor_id, tag, expected):
        mock_connection.execute.return_value = tag
        assert await repository.revoke("p-1", actor_id, "shop_drawings") is expected

    @pytest.mark.asyncio
    async def test_list_for_project(self, repository, mock_connection):
        user = uuid4()
        mock_connection.fetch.return_value = [
            {"user_id": user, "approval_type": "scope_changes"},
        ]
        assert await repository.list_for_project("p-1") == [
            (str(user), ApprovalType.SCOPE_CHANGES),
        ]

    @pytest.mark.asyncio
    async def test_invalid_approval_type_is_rejected_before_querying(self, repository, mock_connection):
        with pytest.raises(ValueError):
            await repository.assign("p-1", "u-1", "change_orders")
        mock_connection.execute.assert_not_called()


class TestActorProfileRepository:

    @pytest.fixture
    def repository(self, fake_pool):
        return AsyncPGActorProfileRepository(fake_pool, settings=PermissionSettings(_env_file=None))

    @pytest.mark.asyncio
    async def test_get_actor_from_bitwise_row(self, repository, mock_connection):
        user = uuid4()
        mock_connection.fetchrow.return_value = {
            "id": user,
            "role": "client",
            "permissions_bitwise": 34818,
            "can_view_costs": None,
        }

        actor = await repository.get_actor(str(user))

        assert actor.id == str(user)
        assert actor.permission_set == 34818
        assert "public.user_profiles" in mock_connection.fetchrow.call_args.args[0]

    @pytest.mark.asyncio
    async def test_cost_override_applied(self, repository, mock_connection, actor_id):
        mock_connection.fetchrow.return_value = {
            "id": actor_id,
            "role": "team_member",
            "permissions_bitwise": None,
            "can_view_costs": True,
        }
        actor = await repository.get_actor(actor_id)
        assert engine.can_view_financial_data(actor.permission_set)

    @pytest.mark.asyncio
    async def test_legacy_names_resolve_when_no_bitwise_value(self, repository, mock_connection, actor_id):
        mock_connection.fetchrow.return_value = {
            "id": actor_id,
            "role": "admin",
            "permissions_bitwise": None,
            "can_view_costs": None,
            "permissions": ["view_drawings", "create_tasks"],
        }

        actor = await repository.get_actor(actor_id)

        assert actor.permission_set == from_legacy_names(["view_drawings", "create_tasks"])
        assert actor.permission_set == int(PermissionFlag.VIEW_SHOP_DRAWINGS | PermissionFlag.CREATE_TASKS)
        assert "can_view_costs, permissions" in mock_connection.fetchrow.call_args.args[0]

    @pytest.mark.asyncio
    async def test_settings_drive_schema_and_strictness(self, fake_pool, mock_connection, actor_id):
        settings = PermissionSettings(
            _env_file=None, database_schema="tenant_a", strict_legacy_names=True
        )
        repository = AsyncPGActorProfileRepository(fake_pool, settings=settings)
        mock_connection.fetchrow.return_value = {
            "id": actor_id,
            "role": "client",
            "permissions_bitwise": None,
            "can_view_costs": None,
            "permissions": ["view_drawings", "teleport"],
        }

        with pytest.raises(UnknownPermissionNameError):
            await repository.get_actor(actor_id)
        assert "tenant_a.user_profiles" in mock_connection.fetchrow.call_args.args[0]

    def test_explicit_arguments_override_settings(self, fake_pool):
        settings = PermissionSettings(
            _env_file=None, database_schema="tenant_a", strict_legacy_names=True
        )
        repository = AsyncPGActorProfileRepository(
            fake_pool, schema="tenant_b", strict_legacy_names=False, settings=settings
        )
        assert repository.table == "tenant_b.user_profiles"
        assert repository.strict_legacy_names is False

    @pytest.mark.asyncio
    async def test_missing_profile(self, repository, mock_connection, actor_id):
        mock_connection.fetchrow.return_value = None
        assert await repository.get_permission_columns(actor_id) is None
        assert await repository.get_actor(actor_id) is None

    @pytest.mark.asyncio
    async def test_query_failure(self, repository, mock_connection, actor_id):
        mock_connection.fetchrow.side_effect = RuntimeError("pool closed")
        with pytest.raises(DatabaseError):
            await repository.get_actor(actor_id)
