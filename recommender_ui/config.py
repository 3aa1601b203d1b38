"""
Configuration for the SHL Recommender UI.

Everything that can differ between a laptop and a deployment is read from
the environment once, at import time.  The wire schemas shared by the
client and the renderer live here too.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Paths
PROJECT_ROOT = Path(__file__).resolve().parents[1]
LOG_DIR = Path(os.getenv("RECOMMENDER_LOG_DIR", str(PROJECT_ROOT / "logs")))
LOG_LEVEL = os.getenv("RECOMMENDER_LOG_LEVEL", "INFO")

# Recommendation endpoint
API_BASE_URL = os.getenv("API_URL", "http://localhost:8000").rstrip("/")
RECOMMEND_PATH = os.getenv("RECOMMEND_PATH", "/recommend")
HEALTH_PATH = "/health"


def _optional_seconds(raw: str | None) -> Optional[float]:
    # "" or "0" means no deadline at all
    if raw is None or not raw.strip():
        return None
    value = float(raw)
    return value if value > 0 else None


# HTTP hardening
HTTP_CONNECT_TIMEOUT = 3.0
DEFAULT_RECOMMEND_TIMEOUT = "60"  # hosted backends cold-start slowly
RECOMMEND_TIMEOUT_SECONDS = _optional_seconds(
    os.getenv("RECOMMEND_TIMEOUT_SECONDS", DEFAULT_RECOMMEND_TIMEOUT)
)
HTTP_USER_AGENT = "shl-recommender-ui/1.0"

# Rendering
DESCRIPTION_PREVIEW_CHARS = 140
ELLIPSIS = "…"
GENERIC_ERROR_MESSAGE = "Failed to fetch recommendations. Please try again."
QUERY_PLACEHOLDER = "e.g. Data Analyst, Leadership role, Graduate hiring"
QUICK_FILL_TAGS: List[str] = [
    "Data Analyst",
    "Leadership role",
    "Graduate hiring",
    "Java developer",
    "Sales representative",
]


def configure_logging(level: str | None = None) -> None:
    """Install the stderr and rotating-file sinks used by the entry points."""
    logger.remove()
    logger.add(sys.stderr, level=level or LOG_LEVEL)
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(LOG_DIR / "recommender_ui.log", level="DEBUG", rotation="1 MB", retention=5)


# Pydantic schemas
class AssessmentItem(BaseModel):
    """One recommended assessment, exactly as the API sends it."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str
    name: str
    description: str
    duration: Optional[int] = None
    adaptive_support: Optional[str] = None
    remote_support: Optional[str] = None
    test_type: List[str] = Field(default_factory=list)

    @field_validator("test_type", mode="before")
    @classmethod
    def _null_test_type(cls, value):
        return [] if value is None else value


class RecommendResponse(BaseModel):
    recommended_assessments: List[AssessmentItem] = Field(default_factory=list)

    @field_validator("recommended_assessments", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value


class QueryRequest(BaseModel):
    query: str = Field(..., min_length=1)


class HealthResponse(BaseModel):
    status: str
