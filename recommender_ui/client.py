"""
HTTP adapter for the remote recommendation service.

``RecommendationClient.recommend`` is the one outbound call the UI makes:
``POST /recommend`` with ``{"query": ...}``.  Anything that is not a 2xx
JSON object matching :class:`~recommender_ui.config.RecommendResponse`
is reported as :class:`RecommendationError`, so callers only ever have a
single failure type to handle.

Notes
-----
* Uses ``httpx`` with a short connect timeout and a caller-supplied read
  deadline (``RECOMMEND_TIMEOUT_SECONDS``); ``None`` waits indefinitely.
* A response without ``recommended_assessments`` is a valid, empty answer.
* ``transport`` can be injected (e.g. ``httpx.MockTransport``) to run the
  client without a network.
"""

from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from .config import (
    API_BASE_URL,
    HEALTH_PATH,
    HTTP_CONNECT_TIMEOUT,
    HTTP_USER_AGENT,
    RECOMMEND_PATH,
    RECOMMEND_TIMEOUT_SECONDS,
    HealthResponse,
    QueryRequest,
    RecommendResponse,
)


class RecommendationError(Exception):
    """The recommendation service could not produce a usable answer."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecommendationClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: Optional[float] = RECOMMEND_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        # a non-positive deadline means wait indefinitely
        self.timeout = timeout if timeout and timeout > 0 else None
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers={"User-Agent": HTTP_USER_AGENT},
            timeout=httpx.Timeout(self.timeout, connect=HTTP_CONNECT_TIMEOUT),
            follow_redirects=True,
            transport=self._transport,
        )

    def _get_json(self, method: str, path: str, **kwargs) -> dict:
        try:
            with self._client() as client:
                r = client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("{} {} timed out after {}s", method, path, self.timeout)
            raise RecommendationError(f"request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("{} {} transport error: {}", method, path, e)
            raise RecommendationError(f"transport error: {e}") from e

        if not r.is_success:
            logger.warning("{} {}: HTTP {}", method, path, r.status_code)
            raise RecommendationError(f"HTTP {r.status_code}", status_code=r.status_code)

        try:
            payload = r.json()
        except ValueError as e:
            logger.warning("{} {}: body is not JSON", method, path)
            raise RecommendationError("response body is not JSON", r.status_code) from e
        if not isinstance(payload, dict):
            logger.warning("{} {}: expected a JSON object, got {}", method, path, type(payload).__name__)
            raise RecommendationError("response body is not a JSON object", r.status_code)
        return payload

    def recommend(self, query: str) -> RecommendResponse:
        """Ask the service for assessments matching ``query``.

        Raises
        ------
        RecommendationError
            On an empty query, transport failure, timeout, non-2xx status or
            a malformed body.
        """
        try:
            body = QueryRequest(query=query).model_dump()
        except ValidationError as e:
            raise RecommendationError("query must be a non-empty string") from e
        payload = self._get_json("POST", RECOMMEND_PATH, json=body)
        try:
            response = RecommendResponse.model_validate(payload)
        except ValidationError as e:
            logger.warning("Malformed recommendation payload: {}", e)
            raise RecommendationError("malformed recommendation payload") from e
        logger.info("Received {} recommendations", len(response.recommended_assessments))
        return response

    def health(self) -> HealthResponse:
        payload = self._get_json("GET", HEALTH_PATH)
        try:
            return HealthResponse.model_validate(payload)
        except ValidationError as e:
            raise RecommendationError("malformed health payload") from e
