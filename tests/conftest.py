"""Pytest configuration and fixtures for formula-commons tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from formula_commons.config.constants import RoleName
from formula_commons.features.permissions.entities import (
    Actor,
    DEFAULT_ROLE_TABLE,
    Resource,
)
from formula_commons.features.permissions.repositories import InMemoryApproverLookup


class FakePool:
    """Stand-in for asyncpg.Pool handing out a single mocked connection."""

    def __init__(self, connection):
        self.connection = connection
        self.acquired = 0

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        yield self.connection


@pytest.fixture
def mock_connection():
    """Mock asyncpg connection for testing."""
    conn = AsyncMock()
    conn.fetchval = AsyncMock()
    conn.fetchrow = AsyncMock()
    conn.fetch = AsyncMock()
    conn.execute = AsyncMock()
    return conn


@pytest.fixture
def fake_pool(mock_connection):
    """Pool wrapping the mocked connection."""
    return FakePool(mock_connection)


@pytest.fixture
def actor_id():
    """Sample actor ID for testing."""
    return str(uuid4())


@pytest.fixture
def other_actor_id():
    """A second actor who owns nothing."""
    return str(uuid4())


@pytest.fixture
def owned_project(actor_id):
    """Project created by the sample actor."""
    return Resource(id=str(uuid4()), owner_id=actor_id)


@pytest.fixture
def foreign_project(other_actor_id):
    """Project created by someone else."""
    return Resource(id=str(uuid4()), owner_id=other_actor_id)


@pytest.fixture
def unsaved_project():
    """Resource not yet persisted: no id, no owner."""
    return Resource()


@pytest.fixture
def approver_lookup():
    """Empty in-memory approver relation."""
    return InMemoryApproverLookup()


@pytest.fixture
def role_sets():
    """Permission set of every default role, keyed by role name."""
    return {name: DEFAULT_ROLE_TABLE.role_value(name) for name in RoleName}


@pytest.fixture
def team_member(actor_id, role_sets):
    """Team member actor."""
    return Actor(id=actor_id, permission_set=role_sets[RoleName.TEAM_MEMBER])


@pytest.fixture
def cost_records():
    """Scope items carrying cost fields."""
    return [
        {"id": "s-1", "description": "Rebar", "quantity": 40, "unit_cost": 12.5, "total_cost": 500.0},
        {"id": "s-2", "description": "Formwork", "quantity": 10, "budget": 900, "price": 85},
    ]
