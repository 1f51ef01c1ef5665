"""Tests for the meal photo REST API.

Requests go through httpx.AsyncClient with ASGITransport; the app lifespan
is entered explicitly so the provider context is set up.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from caloriesnap.app import create_app
from caloriesnap.domain.shared.errors import RemoteCallError, RemoteTimeoutError
from caloriesnap.infrastructure.config import AppSettings
from caloriesnap.infrastructure.meal.providers.stub_provider import (
    STUB_MEALS,
    StubMealProvider,
)

SETTINGS = AppSettings(vision_provider="stub", image_max_dimension=0, app_version="9.9.9")


@asynccontextmanager
async def running_app(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Enter the app lifespan and yield an HTTP client bound to it."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            yield client


def photo(payload: bytes, content_type: str = "image/png") -> dict:
    return {"file": ("lunch.png", payload, content_type)}


class TestServiceEndpoints:
    """Test liveness endpoints."""

    @pytest.mark.asyncio
    async def test_health(self) -> None:
        async with running_app(create_app(SETTINGS, provider=StubMealProvider())) as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_version(self) -> None:
        async with running_app(create_app(SETTINGS, provider=StubMealProvider())) as client:
            response = await client.get("/version")

        assert response.json() == {"version": "9.9.9"}


class TestLifespan:
    """Test provider context handling."""

    @pytest.mark.asyncio
    async def test_provider_context_entered_and_exited(self, mock_provider) -> None:
        app = create_app(SETTINGS, provider=mock_provider)

        async with app.router.lifespan_context(app):
            mock_provider.__aenter__.assert_awaited_once()
            assert app.state.services.sessions is not None

        mock_provider.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_provider_built_from_settings(self) -> None:
        app = create_app(SETTINGS)

        async with app.router.lifespan_context(app):
            services = app.state.services

        assert isinstance(services.identification._identifier, StubMealProvider)


class TestSessionPipeline:
    """Test the session upload flow."""

    @pytest.mark.asyncio
    async def test_upload_and_wait(self, mock_provider, png_bytes) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/sessions/tab-1/images", files=photo(png_bytes))

            state = await client.get("/api/v1/sessions/tab-1/state")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "SUCCEEDED"
        assert body["run_id"] == 1
        assert body["food_items"] == ["apple", "toast"]
        assert body["calorie_estimate"] == "apple: 95 kcal, toast: 120 kcal"
        assert state.json() == body

    @pytest.mark.asyncio
    async def test_upload_with_stub_provider(self, png_bytes) -> None:
        async with running_app(create_app(SETTINGS, provider=StubMealProvider())) as client:
            response = await client.post("/api/v1/sessions/tab-1/images", files=photo(png_bytes))

        body = response.json()
        assert body["status"] == "SUCCEEDED"
        assert body["food_items"] in STUB_MEALS
        assert "Total:" in body["calorie_estimate"]

    @pytest.mark.asyncio
    async def test_no_food_message(self, mock_provider, png_bytes) -> None:
        mock_provider.identify_food_items.return_value = []

        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/sessions/tab-1/images", files=photo(png_bytes))

        body = response.json()
        assert body["status"] == "SUCCEEDED"
        assert body["food_items"] == []
        assert body["calorie_estimate"] is None
        assert body["message"] == "No food items were recognised in the image."
        mock_provider.estimate_calories.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_image_stays_idle(self, mock_provider) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post(
                "/api/v1/sessions/tab-1/images",
                files=photo(b"just text", content_type="text/plain"),
            )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "IDLE"
        assert "not an image" in body["notice"]
        mock_provider.identify_food_items.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remote_failure_in_state(self, mock_provider, png_bytes) -> None:
        mock_provider.estimate_calories.side_effect = RemoteCallError("API down")

        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/sessions/tab-1/images", files=photo(png_bytes))

        assert response.status_code == 200
        assert response.json()["status"] == "FAILED"
        assert response.json()["message"] == "Could not estimate calories: API down"

    @pytest.mark.asyncio
    async def test_upload_without_waiting(self, mock_provider, png_bytes) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post(
                "/api/v1/sessions/tab-1/images?wait=false", files=photo(png_bytes)
            )

            for _ in range(50):
                state = (await client.get("/api/v1/sessions/tab-1/state")).json()
                if state["status"] != "PROCESSING":
                    break

        assert response.status_code == 202
        assert response.json()["status"] in ("PROCESSING", "SUCCEEDED")
        assert state["status"] == "SUCCEEDED"
        assert state["food_items"] == ["apple", "toast"]

    @pytest.mark.asyncio
    async def test_unknown_session_is_idle(self, mock_provider) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.get("/api/v1/sessions/nobody/state")

        assert response.json()["status"] == "IDLE"

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, mock_provider, png_bytes) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            await client.post("/api/v1/sessions/tab-1/images", files=photo(png_bytes))
            other = await client.get("/api/v1/sessions/tab-2/state")

        assert other.json()["status"] == "IDLE"


class TestSingleSteps:
    """Test the identify and estimate endpoints."""

    @pytest.mark.asyncio
    async def test_identify(self, mock_provider, png_bytes) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/identify", files=photo(png_bytes))

        assert response.status_code == 200
        assert response.json() == {"food_items": ["apple", "toast"], "message": None}
        mock_provider.estimate_calories.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_identify_rejects_non_image(self, mock_provider) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post(
                "/api/v1/identify", files=photo(b"%PDF-1.4", content_type="application/pdf")
            )

        assert response.status_code == 400
        assert "not an image" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_identify_timeout(self, mock_provider, png_bytes) -> None:
        mock_provider.identify_food_items.side_effect = RemoteTimeoutError("timed out")

        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/identify", files=photo(png_bytes))

        assert response.status_code == 504

    @pytest.mark.asyncio
    async def test_estimate(self, mock_provider) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post(
                "/api/v1/estimate", json={"food_items": ["apple", " toast "]}
            )

        assert response.status_code == 200
        assert response.json() == {"estimated_calories": "apple: 95 kcal, toast: 120 kcal"}
        mock_provider.estimate_calories.assert_awaited_once_with("apple, toast")

    @pytest.mark.asyncio
    async def test_estimate_requires_items(self, mock_provider) -> None:
        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/estimate", json={"food_items": ["", " "]})

        assert response.status_code == 400
        mock_provider.estimate_calories.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_estimate_remote_failure(self, mock_provider) -> None:
        mock_provider.estimate_calories.side_effect = RemoteCallError("API down")

        async with running_app(create_app(SETTINGS, provider=mock_provider)) as client:
            response = await client.post("/api/v1/estimate", json={"food_items": ["apple"]})

        assert response.status_code == 502
        assert response.json()["detail"] == "API down"
