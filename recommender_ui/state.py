"""
Query submission state machine.

``QueryController`` owns one :class:`SearchState` and is the only thing
allowed to mutate it.  The phase moves

    IDLE -> LOADING -> SUCCESS | ERROR -> LOADING -> ...

and never returns to IDLE.  At most one request is in flight: while the
phase is LOADING, ``submit`` does nothing, including when it is called
re-entrantly from inside the collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from loguru import logger

from .config import GENERIC_ERROR_MESSAGE, AssessmentItem, RecommendResponse

Collaborator = Callable[[str], RecommendResponse]


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True)
class SearchState:
    """Everything the renderer needs to draw the screen."""

    query: str = ""
    phase: Phase = Phase.IDLE
    results: List[AssessmentItem] = field(default_factory=list)
    error_message: Optional[str] = None
    has_searched_once: bool = False
    submitted_query: Optional[str] = None
    # bumped whenever ``results`` is replaced; part of each card's identity
    result_set: int = 0


class QueryController:
    def __init__(self, collaborator: Collaborator, state: SearchState | None = None) -> None:
        self._collaborator = collaborator
        self.state = state if state is not None else SearchState()

    @property
    def can_submit(self) -> bool:
        return self.state.phase is not Phase.LOADING and bool(self.state.query.strip())

    def set_query(self, text: str) -> None:
        self.state.query = text

    def quick_fill(self, tag: str) -> None:
        self.set_query(tag)

    def reset_query(self) -> None:
        self.set_query("")

    def submit(self) -> None:
        """Send the current query, unless it is blank or a request is pending.

        The outcome is observed through ``self.state``; collaborator
        failures end in ``Phase.ERROR`` and never propagate.
        """
        if self.state.phase is Phase.LOADING:
            logger.debug("Submit ignored: a request is already in flight")
            return
        query = self.state.query.strip()
        if not query:
            logger.debug("Submit ignored: empty query")
            return

        self._begin(query)
        try:
            response = self._collaborator(query)
            records = [] if response is None else list(response.recommended_assessments)
        except Exception as e:
            logger.opt(exception=e).warning("Recommendation request failed for {!r}", query)
            self._fail(GENERIC_ERROR_MESSAGE)
            return
        self._succeed(records)

    def _begin(self, query: str) -> None:
        s = self.state
        s.phase = Phase.LOADING
        s.has_searched_once = True
        s.error_message = None
        s.submitted_query = query
        logger.info("Requesting recommendations for {!r}", query)

    def _succeed(self, records: List[AssessmentItem]) -> None:
        s = self.state
        s.results = list(records)
        s.result_set += 1
        s.error_message = None
        s.phase = Phase.SUCCESS
        logger.info("Showing {} recommendations", len(s.results))

    def _fail(self, message: str) -> None:
        s = self.state
        s.results = []
        s.result_set += 1
        s.error_message = message
        s.phase = Phase.ERROR
