"""
In-memory registry of browser sessions.

Each browser session owns one MealPipelineOrchestrator so it observes only
its own uploads. Nothing is persisted; least recently used sessions are
evicted once ``max_sessions`` is reached.
"""

import logging
from collections import OrderedDict
from typing import Callable, Optional

from caloriesnap.application.meal.orchestrators.pipeline_orchestrator import (
    MealPipelineOrchestrator,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


class SessionRegistry:
    """Maps session ids to their orchestrator.

    NOT shared across processes: run a single worker or pin sessions.
    """

    def __init__(
        self,
        orchestrator_factory: Callable[[], MealPipelineOrchestrator],
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        """Initialize empty registry.

        Args:
            orchestrator_factory: Builds a fresh orchestrator for a new session
            max_sessions: Sessions kept before evicting the least recently used
        """
        self._factory = orchestrator_factory
        self._max_sessions = max_sessions
        self._sessions: "OrderedDict[str, MealPipelineOrchestrator]" = OrderedDict()

    def get_or_create(self, session_id: str) -> MealPipelineOrchestrator:
        """Return the session's orchestrator, creating it on first use."""
        orchestrator = self._sessions.get(session_id)
        if orchestrator is not None:
            self._sessions.move_to_end(session_id)
            return orchestrator

        orchestrator = self._factory()
        self._sessions[session_id] = orchestrator
        logger.debug(f"Session created: {session_id}")

        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug(f"Session evicted: {evicted}")

        return orchestrator

    def get(self, session_id: str) -> Optional[MealPipelineOrchestrator]:
        """Return the session's orchestrator if it exists."""
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
