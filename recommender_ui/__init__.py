"""
Client package for the SHL assessment recommender.

The package wraps the remote ``/recommend`` endpoint in a small state
machine (:mod:`recommender_ui.state`), derives everything a screen needs
from that state (:mod:`recommender_ui.render`) and ships two front ends on
top: a Streamlit page (:mod:`recommender_ui.app`) and a terminal runner
(:mod:`recommender_ui.cli`).  Importing the package has no side-effects.
"""

from .config import AssessmentItem, RecommendResponse
from .state import Phase, QueryController, SearchState

__all__ = [
    "AssessmentItem",
    "Phase",
    "QueryController",
    "RecommendResponse",
    "SearchState",
]
