"""Shared fixtures: record factories and a call-counting collaborator stub."""

from typing import Callable, List, Optional

import httpx
import pytest

from recommender_ui.client import RecommendationClient
from recommender_ui.config import AssessmentItem, RecommendResponse


def make_item(name: str = "Verify Numerical Ability", **overrides) -> AssessmentItem:
    fields = {
        "name": name,
        "url": f"https://www.shl.com/products/{name.lower().replace(' ', '-')}/",
        "description": f"{name} measures job-relevant ability.",
        "duration": 20,
        "adaptive_support": "No",
        "remote_support": "Yes",
        "test_type": ["Ability & Aptitude"],
    }
    fields.update(overrides)
    return AssessmentItem(**fields)


class StubCollaborator:
    """Callable stand-in for ``RecommendationClient.recommend``."""

    def __init__(self, records: Optional[List[AssessmentItem]] = None, error: Exception | None = None):
        self.records = records or []
        self.error = error
        self.calls: List[str] = []
        self.during_call: Callable[[], None] | None = None

    def __call__(self, query: str) -> RecommendResponse:
        self.calls.append(query)
        if self.during_call is not None:
            self.during_call()
        if self.error is not None:
            raise self.error
        return RecommendResponse(recommended_assessments=self.records)


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def stub():
    return StubCollaborator()


@pytest.fixture
def mock_client():
    """Build a client whose requests are answered by ``handler``."""

    def _build(handler, timeout: float | None = 5.0) -> RecommendationClient:
        return RecommendationClient(
            base_url="http://recommender.test",
            timeout=timeout,
            transport=httpx.MockTransport(handler),
        )

    return _build
