"""REST API endpoints for meal photo analysis.

Two ways to use it:
1. Session pipeline: upload a photo to a browser session and read its
   PipelineState (loading / error / result)
2. Single steps: identify food items in a photo, or estimate calories for
   a list of food items
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, Request, Response, UploadFile
from pydantic import BaseModel, Field

from caloriesnap.application.meal.sessions import SessionRegistry
from caloriesnap.domain.meal.estimation.services.estimation_service import (
    CalorieEstimationService,
)
from caloriesnap.domain.meal.ingestion.ingestor import ImageIngestor
from caloriesnap.domain.meal.pipeline.state import Idle, PipelineState, Succeeded
from caloriesnap.domain.meal.recognition.services.identification_service import (
    FoodIdentificationService,
)
from caloriesnap.domain.shared.errors import (
    DomainError,
    InvalidInputError,
    ReadError,
    RemoteCallError,
    RemoteTimeoutError,
)

logger = logging.getLogger(__name__)

NO_FOOD_MESSAGE = "No food items were recognised in the image."

router = APIRouter(prefix="/api/v1", tags=["meal-photo"])


class PipelineStateResponse(BaseModel):
    """Response model for a session's pipeline state."""

    status: str
    run_id: Optional[int] = None
    notice: Optional[str] = None
    food_items: Optional[List[str]] = None
    calorie_estimate: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_state(cls, state: PipelineState) -> "PipelineStateResponse":
        data = state.to_dict()
        if isinstance(state, Succeeded) and not state.has_food_items:
            data["message"] = NO_FOOD_MESSAGE
        return cls(**data)


class IdentifyResponse(BaseModel):
    """Response model for food identification."""

    food_items: List[str]
    message: Optional[str] = None


class EstimateRequest(BaseModel):
    """Request model for calorie estimation."""

    food_items: List[str] = Field(..., description="Identified food items")


class EstimateResponse(BaseModel):
    """Response model for calorie estimation."""

    estimated_calories: str


# ═══════════════════════════════════════════════════════════
# DEPENDENCIES
# ═══════════════════════════════════════════════════════════


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.services.sessions


def get_ingestor(request: Request) -> ImageIngestor:
    return request.app.state.services.ingestor


def get_identification_service(request: Request) -> FoodIdentificationService:
    return request.app.state.services.identification


def get_estimation_service(request: Request) -> CalorieEstimationService:
    return request.app.state.services.estimation


def to_http_error(error: DomainError) -> HTTPException:
    """Map a domain error to an HTTP error."""
    if isinstance(error, (InvalidInputError, ReadError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, RemoteTimeoutError):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, RemoteCallError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


# ═══════════════════════════════════════════════════════════
# SESSION PIPELINE
# ═══════════════════════════════════════════════════════════


@router.post("/sessions/{session_id}/images", response_model=PipelineStateResponse)
async def submit_image(
    response: Response,
    session_id: str = Path(..., min_length=1, max_length=128, description="Browser session id"),
    file: UploadFile = File(..., description="Meal photo"),
    wait: bool = Query(True, description="Wait for the run to settle"),
    sessions: SessionRegistry = Depends(get_session_registry),
) -> PipelineStateResponse:
    """Upload a meal photo and run the identify -> estimate pipeline.

    A new upload supersedes any run still in flight for the same session.

    Returns:
        The session's state. With ``wait=false`` the run continues in the
        background and the response is 202 with the state at submission time.

    Example:
        ```bash
        curl -X POST http://localhost:8080/api/v1/sessions/tab-1/images \\
          -F "file=@/path/to/lunch.jpg"
        ```
    """
    logger.info(
        "Image submitted",
        extra={
            "session_id": session_id,
            "file_name": file.filename,
            "content_type": file.content_type,
            "wait": wait,
        },
    )

    orchestrator = sessions.get_or_create(session_id)

    if wait:
        await orchestrator.run(file.file, file.content_type, filename=file.filename)
    else:
        orchestrator.submit_image(file.file, file.content_type, filename=file.filename)
        response.status_code = 202

    return PipelineStateResponse.from_state(orchestrator.state)


@router.get("/sessions/{session_id}/state", response_model=PipelineStateResponse)
async def get_state(
    session_id: str = Path(..., min_length=1, max_length=128),
    sessions: SessionRegistry = Depends(get_session_registry),
) -> PipelineStateResponse:
    """Current pipeline state of a session (Idle for unknown sessions)."""
    orchestrator = sessions.get(session_id)
    state: PipelineState = orchestrator.state if orchestrator else Idle()
    return PipelineStateResponse.from_state(state)


# ═══════════════════════════════════════════════════════════
# SINGLE STEPS
# ═══════════════════════════════════════════════════════════


@router.post("/identify", response_model=IdentifyResponse)
async def identify_food_items(
    file: UploadFile = File(..., description="Meal photo"),
    ingestor: ImageIngestor = Depends(get_ingestor),
    identification: FoodIdentificationService = Depends(get_identification_service),
) -> IdentifyResponse:
    """Identify the food items in a photo, without estimating calories."""
    try:
        asset = ingestor.ingest(file.file, file.content_type, filename=file.filename)
        items = await identification.identify(asset)
    except DomainError as e:
        raise to_http_error(e) from e

    return IdentifyResponse(food_items=items, message=None if items else NO_FOOD_MESSAGE)


@router.post("/estimate", response_model=EstimateResponse)
async def estimate_calories(
    request: EstimateRequest,
    estimation: CalorieEstimationService = Depends(get_estimation_service),
) -> EstimateResponse:
    """Estimate calories for a list of food items."""
    items = [item.strip() for item in request.food_items if item.strip()]
    try:
        text = await estimation.estimate(items)
    except DomainError as e:
        raise to_http_error(e) from e

    return EstimateResponse(estimated_calories=text)
