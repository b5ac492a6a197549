"""Integration tests for the capability endpoints."""

import pytest
from httpx import AsyncClient

from jobguard.core.permissions import list_permissions


pytestmark = pytest.mark.integration


class TestMyPermissions:
    async def test_requires_actor(self, client: AsyncClient):
        response = await client.get("/api/v1/permissions/me")

        assert response.status_code == 401

    async def test_lists_role_permissions(self, client: AsyncClient, current_actor, employer):
        current_actor["actor"] = employer

        response = await client.get("/api/v1/permissions/me")

        assert response.status_code == 200
        data = response.json()
        assert data["actor_id"] == "U1"
        assert data["role"] == "employer"
        assert data["permissions"] == list(list_permissions("employer"))
        assert "jobs:create" in data["permissions"]
        assert "users:delete" not in data["permissions"]


class TestRoles:
    async def test_most_privileged_first(self, client: AsyncClient):
        response = await client.get("/api/v1/roles")

        assert response.status_code == 200
        assert [r["role"] for r in response.json()] == [
            "admin",
            "employer",
            "candidate",
            "viewer",
        ]
