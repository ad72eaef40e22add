"""
Tests for the FastAPI permission dependencies.
"""

import pytest
from fastapi import Depends, FastAPI, Header
from fastapi.testclient import TestClient

from formula_commons.api import register_exception_handlers
from formula_commons.config.constants import RoleName
from formula_commons.core.exceptions import DatabaseError, UnknownPermissionNameError
from formula_commons.features.permissions.dependencies import PermissionDependencies
from formula_commons.features.permissions.entities import Actor, PermissionFlag, role_value

F = PermissionFlag


async def actor_from_headers(
    x_actor_id: str = Header(...),
    x_role: str = Header(...),
) -> Actor:
    return Actor(id=x_actor_id, permission_set=role_value(x_role))


@pytest.fixture
def client():
    permissions = PermissionDependencies(actor_from_headers)
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/tasks")
    async def create_task(actor: Actor = Depends(permissions.require_flag(F.CREATE_TASKS))):
        return {"actor": actor.id}

    @app.get("/drawings/approve")
    async def approve_drawing(
        actor: Actor = Depends(permissions.require_any(
            [F.APPROVE_SHOP_DRAWINGS, F.APPROVE_SHOP_DRAWINGS_CLIENT]
        ))
    ):
        return {"actor": actor.id}

    @app.get("/costs/edit")
    async def edit_costs(
        actor: Actor = Depends(permissions.require_all(
            (flag for flag in (F.VIEW_FINANCIAL_DATA, F.APPROVE_EXPENSES))
        ))
    ):
        return {"actor": actor.id}

    @app.get("/admin")
    async def admin(actor: Actor = Depends(permissions.require_admin())):
        return {"actor": actor.id}

    return TestClient(app)


def headers(role):
    return {"x-actor-id": "u-1", "x-role": role}


class TestRequireFlag:

    def test_allowed(self, client):
        response = client.get("/tasks", headers=headers(RoleName.TEAM_MEMBER.value))
        assert response.status_code == 200
        assert response.json() == {"actor": "u-1"}

    def test_denied(self, client):
        response = client.get("/tasks", headers=headers("client"))
        assert response.status_code == 403
        error = response.json()["error"]
        assert error["code"] == "PERMISSION_DENIED"
        assert error["type"] == "PermissionDeniedError"
        assert error["details"] == {"required": ["CREATE_TASKS"]}

    def test_unknown_role_is_denied(self, client):
        assert client.get("/tasks", headers=headers("superuser")).status_code == 403


class TestRequireAnyAll:

    @pytest.mark.parametrize("role, status_code", [
        ("client", 200),
        ("project_manager", 200),
        ("team_member", 403),
    ])
    def test_require_any(self, client, role, status_code):
        assert client.get("/drawings/approve", headers=headers(role)).status_code == status_code

    def test_require_any_lists_every_alternative(self, client):
        response = client.get("/drawings/approve", headers=headers("team_member"))
        assert response.json()["error"]["details"]["required"] == [
            "APPROVE_SHOP_DRAWINGS",
            "APPROVE_SHOP_DRAWINGS_CLIENT",
        ]

    @pytest.mark.parametrize("role, status_code", [
        ("technical_manager", 200),
        ("project_manager", 403),
        ("accountant", 403),
    ])
    def test_require_all(self, client, role, status_code):
        assert client.get("/costs/edit", headers=headers(role)).status_code == status_code


class TestRequireAdmin:

    def test_admin(self, client):
        assert client.get("/admin", headers=headers("admin")).status_code == 200

    def test_technical_manager_is_not_admin(self, client):
        assert client.get("/admin", headers=headers("technical_manager")).status_code == 403


class TestExceptionHandlers:

    def test_library_errors_map_to_their_status(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/legacy")
        async def legacy():
            raise UnknownPermissionNameError("teleport")

        @app.get("/db")
        async def db():
            raise DatabaseError("pool closed")

        client = TestClient(app)
        response = client.get("/legacy")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "UNKNOWN_PERMISSION_NAME"
        assert client.get("/db").status_code == 500
