"""Meal pipeline orchestrator.

Sequences ingestion, food identification and calorie estimation for one
uploaded photo, and owns the resulting PipelineState.
"""

import asyncio
import itertools
import logging
from typing import BinaryIO, Callable, List, Optional, Set, Tuple

from caloriesnap.domain.meal.estimation.services.estimation_service import (
    CalorieEstimationService,
)
from caloriesnap.domain.meal.ingestion.entities import ImageAsset
from caloriesnap.domain.meal.ingestion.ingestor import ImageIngestor
from caloriesnap.domain.meal.pipeline.state import (
    Failed,
    Idle,
    PipelineState,
    Processing,
    StepFailed,
    StepOutcome,
    StepSucceeded,
    Succeeded,
)
from caloriesnap.domain.meal.recognition.services.identification_service import (
    FoodIdentificationService,
)
from caloriesnap.domain.shared.errors import InvalidInputError, ReadError

logger = logging.getLogger(__name__)

StateListener = Callable[[PipelineState], None]

SUPERSEDED_MESSAGE = "Run superseded by a newer upload"
CANCELLED_MESSAGE = "Run cancelled"


class MealPipelineOrchestrator:
    """
    Orchestrate the photo -> food items -> calorie estimate workflow.

    Flow:
    1. Ingest the upload (ImageIngestor); invalid input leaves the state Idle
    2. Identify food items (FoodIdentificationService)
    3. Empty list: succeed without estimating
    4. Estimate calories (CalorieEstimationService)

    The orchestrator is the only writer of ``state``. Every upload takes a new
    run id; a transition computed by a run that is no longer the latest is
    discarded, so the observed state always belongs to the newest upload.

    Example:
        >>> orchestrator = MealPipelineOrchestrator(
        ...     ingestor=ImageIngestor(),
        ...     identification_service=identification,
        ...     estimation_service=estimation,
        ... )
        >>> with open("lunch.jpg", "rb") as fh:
        ...     final = await orchestrator.run(fh, "image/jpeg")
        >>> final.to_dict()
        {'status': 'SUCCEEDED', 'run_id': 1, 'food_items': [...], ...}
    """

    def __init__(
        self,
        ingestor: ImageIngestor,
        identification_service: FoodIdentificationService,
        estimation_service: CalorieEstimationService,
    ):
        """
        Initialize orchestrator.

        Args:
            ingestor: Validates and encodes uploads
            identification_service: Photo -> food items
            estimation_service: Food items -> calorie text
        """
        self._ingestor = ingestor
        self._identification = identification_service
        self._estimation = estimation_service

        self._state: PipelineState = Idle()
        self._run_ids = itertools.count(1)
        self._latest_run_id = 0
        self._listeners: List[StateListener] = []
        self._tasks: Set["asyncio.Task[PipelineState]"] = set()

    # ═══════════════════════════════════════════════════════════
    # READ SIDE
    # ═══════════════════════════════════════════════════════════

    @property
    def state(self) -> PipelineState:
        """Current pipeline state (read-only)."""
        return self._state

    @property
    def latest_run_id(self) -> int:
        """Id of the most recently started run (0 before the first upload)."""
        return self._latest_run_id

    @property
    def is_processing(self) -> bool:
        return isinstance(self._state, Processing)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every applied state.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ═══════════════════════════════════════════════════════════
    # WRITE SIDE
    # ═══════════════════════════════════════════════════════════

    def submit_image(
        self,
        file: BinaryIO,
        media_type: Optional[str],
        filename: Optional[str] = None,
    ) -> Optional["asyncio.Task[PipelineState]"]:
        """
        Start a new run for an uploaded file (fire-and-forget).

        The upload is read and validated immediately; the remote calls run in
        a background task. Must be called from a running event loop.

        Args:
            file: Readable binary stream with the upload
            media_type: Declared MIME type
            filename: Original filename

        Returns:
            The background task, or None when the upload was rejected
            (the state is then Idle with a notice)
        """
        run_id, asset = self._start_run(file, media_type, filename)
        if asset is None:
            return None

        task = asyncio.create_task(self._analyze(run_id, asset))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(
        self,
        file: BinaryIO,
        media_type: Optional[str],
        filename: Optional[str] = None,
    ) -> PipelineState:
        """
        Run the whole pipeline for an upload and wait for it to settle.

        Returns:
            The final state computed by this run. If a newer upload started
            in the meantime, this state was not applied and differs from
            ``state``. Cancelling the caller does not cancel the run.
        """
        task = self.submit_image(file, media_type, filename)
        if task is None:
            return self._state
        return await asyncio.shield(task)

    def _start_run(
        self,
        file: BinaryIO,
        media_type: Optional[str],
        filename: Optional[str],
    ) -> Tuple[int, Optional[ImageAsset]]:
        """Reset to Idle, ingest the upload and enter Processing."""
        run_id = next(self._run_ids)
        self._latest_run_id = run_id
        self._apply(run_id, Idle())

        logger.info(
            "Pipeline run started",
            extra={"run_id": run_id, "file_name": filename, "media_type": media_type},
        )

        try:
            asset = self._ingestor.ingest(file, media_type, filename=filename)
        except (InvalidInputError, ReadError) as e:
            logger.warning(
                "Upload rejected",
                extra={"run_id": run_id, "error": str(e), "error_type": type(e).__name__},
            )
            self._apply(run_id, Idle(notice=str(e)))
            return run_id, None

        self._apply(run_id, Processing(run_id=run_id))
        return run_id, asset

    async def _analyze(self, run_id: int, asset: ImageAsset) -> PipelineState:
        """Run both steps; a cancelled run settles as Failed before re-raising."""
        try:
            return await self._run_steps(run_id, asset)
        except asyncio.CancelledError:
            self._finish(run_id, Failed(run_id, CANCELLED_MESSAGE))
            raise

    async def _run_steps(self, run_id: int, asset: ImageAsset) -> PipelineState:
        """Identification then (if needed) estimation for one run."""
        identified = await self._identify(asset)

        if isinstance(identified, StepFailed):
            return self._finish(
                run_id, Failed(run_id, f"Could not identify food items: {identified.message}")
            )

        food_items = identified.value
        if not food_items:
            logger.info("No food items recognised", extra={"run_id": run_id})
            return self._finish(run_id, Succeeded(run_id, food_items=[]))

        if not self._is_current(run_id):
            # Newer upload in flight; skip the second remote call
            logger.debug("Run superseded before estimation", extra={"run_id": run_id})
            return Failed(run_id, SUPERSEDED_MESSAGE)

        estimated = await self._estimate(food_items)

        if isinstance(estimated, StepFailed):
            return self._finish(
                run_id, Failed(run_id, f"Could not estimate calories: {estimated.message}")
            )

        return self._finish(
            run_id,
            Succeeded(run_id, food_items=food_items, calorie_estimate=estimated.value),
        )

    async def _identify(self, asset: ImageAsset) -> StepOutcome[List[str]]:
        try:
            return StepSucceeded(await self._identification.identify(asset))
        except Exception as e:
            return StepFailed(e)

    async def _estimate(self, food_items: List[str]) -> StepOutcome[str]:
        try:
            return StepSucceeded(await self._estimation.estimate(food_items))
        except Exception as e:
            return StepFailed(e)

    def _finish(self, run_id: int, state: PipelineState) -> PipelineState:
        applied = self._apply(run_id, state)
        logger.info(
            "Pipeline run finished",
            extra={"run_id": run_id, "status": state.status.value, "applied": applied},
        )
        return state

    def _is_current(self, run_id: int) -> bool:
        return run_id == self._latest_run_id

    def _apply(self, run_id: int, state: PipelineState) -> bool:
        """Replace the state unless ``run_id`` has been superseded."""
        if not self._is_current(run_id):
            logger.debug(
                "Discarding stale response",
                extra={
                    "run_id": run_id,
                    "latest_run_id": self._latest_run_id,
                    "status": state.status.value,
                },
            )
            return False

        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed", extra={"run_id": run_id})
        return True
