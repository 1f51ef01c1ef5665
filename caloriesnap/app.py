from __future__ import annotations

import logging as _logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from caloriesnap.api import meal_photo
from caloriesnap.application.meal.orchestrators.pipeline_orchestrator import (
    MealPipelineOrchestrator,
)
from caloriesnap.application.meal.sessions import SessionRegistry
from caloriesnap.domain.meal.estimation.services.estimation_service import (
    CalorieEstimationService,
)
from caloriesnap.domain.meal.ingestion.ingestor import ImageIngestor
from caloriesnap.domain.meal.recognition.services.identification_service import (
    FoodIdentificationService,
)
from caloriesnap.infrastructure.config import AppSettings, load_settings, mask_secret
from caloriesnap.infrastructure.meal.providers.factory import MealProvider, create_meal_provider

# Settings are read once, at process start
load_dotenv()
SETTINGS = load_settings()

# --- Basic logging configuration (minimal) ---
_logging.basicConfig(
    level=getattr(_logging, SETTINGS.log_level, _logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@dataclass
class AppServices:
    """Services shared by every request."""

    ingestor: ImageIngestor
    identification: FoodIdentificationService
    estimation: CalorieEstimationService
    sessions: SessionRegistry


def build_services(settings: AppSettings, provider: MealProvider) -> AppServices:
    """Wire domain services and the session registry around one provider."""
    ingestor = ImageIngestor(
        max_upload_bytes=settings.max_upload_bytes,
        max_dimension=settings.image_max_dimension,
    )
    identification = FoodIdentificationService(provider)
    estimation = CalorieEstimationService(provider)

    def new_orchestrator() -> MealPipelineOrchestrator:
        return MealPipelineOrchestrator(
            ingestor=ingestor,
            identification_service=identification,
            estimation_service=estimation,
        )

    return AppServices(
        ingestor=ingestor,
        identification=identification,
        estimation=estimation,
        sessions=SessionRegistry(new_orchestrator, max_sessions=settings.max_sessions),
    )


def create_app(
    settings: Optional[AppSettings] = None,
    provider: Optional[MealProvider] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Defaults to the settings read at process start
        provider: Overrides the provider selected by ``settings``
    """
    settings = settings or SETTINGS

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Enter the provider's async context and wire services for the app's lifetime."""
        logger = _logging.getLogger("startup")

        logger.info(
            "startup.config",
            extra={
                "vision_provider": settings.vision_provider,
                "openai_model": settings.openai_model,
                "openai_key_present": bool(settings.openai_api_key),
                "openai_key_masked": mask_secret(settings.openai_api_key),
            },
        )

        client = provider or create_meal_provider(settings)

        async with client as initialized:
            app.state.services = build_services(settings, initialized)

            logger.info(
                "lifespan.ready",
                extra={"provider": type(initialized).__name__, "status": "serving"},
            )
            yield

            logger.info("lifespan.shutdown", extra={"status": "cleanup"})

    app = FastAPI(
        title="CalorieSnap",
        description="Meal photo -> food items -> calorie estimate",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(meal_photo.router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version() -> dict[str, str]:
        return {"version": settings.app_version}

    return app


app = create_app()
