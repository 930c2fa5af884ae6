# tests/e2e/test_health.py
"""End-to-end tests for health probes, request IDs and error rendering."""

import uuid

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from companion_service.infrastructure.database.connection import DatabaseManager


@pytest.mark.e2e
class TestHealth:

    async def test_liveness(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_ready_without_redis_is_degraded(self, async_client: AsyncClient):
        response = await async_client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        components = {c["name"]: c for c in data["components"]}
        assert components["database"]["status"] == "healthy"
        assert components["cache"]["details"] == {"backend": "memory"}

    async def test_ready_without_database_is_503(self, async_client: AsyncClient, app: FastAPI):
        app.state.db = DatabaseManager()

        response = await async_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    async def test_companion_routes_need_database(self, async_client: AsyncClient, app: FastAPI):
        app.state.db = DatabaseManager()

        response = await async_client.get("/api/v1/companions")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"


@pytest.mark.e2e
class TestRequestId:

    async def test_generated_when_missing(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        request_id = response.headers["X-Request-ID"]
        assert uuid.UUID(request_id).version == 4

    async def test_valid_id_is_echoed(self, async_client: AsyncClient):
        request_id = str(uuid.uuid4())

        response = await async_client.get("/health", headers={"X-Request-ID": request_id})

        assert response.headers["X-Request-ID"] == request_id

    async def test_invalid_id_is_replaced(self, async_client: AsyncClient):
        response = await async_client.get("/health", headers={"X-Request-ID": "not-a-uuid"})

        assert response.headers["X-Request-ID"] != "not-a-uuid"

    async def test_error_body_carries_request_id(self, async_client: AsyncClient):
        request_id = str(uuid.uuid4())

        response = await async_client.get(
            f"/api/v1/companions/{uuid.uuid4()}", headers={"X-Request-ID": request_id}
        )

        assert response.status_code == 404
        assert response.json()["request_id"] == request_id
