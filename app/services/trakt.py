"""Utilities for communicating with the Trakt API."""

from __future__ import annotations

import logging

import httpx

from ..config import Settings
from ..models import ContentType
from .upstream import Failure, FailureKind, FetchResult, fetch_json

logger = logging.getLogger(__name__)


class TraktClient:
    """Thin wrapper around the Trakt HTTP API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    def _headers(self) -> dict[str, str]:
        headers = {
            "trakt-api-version": "2",
            "User-Agent": f"{self._settings.app_name} (megacatalog)",
        }
        if self._settings.trakt_client_id:
            headers["trakt-api-key"] = self._settings.trakt_client_id
        return headers

    async def fetch_trending(
        self, content_type: ContentType, *, page: int = 1, limit: int = 20
    ) -> FetchResult:
        """Fetch one page of trending envelopes (``{"watchers": .., "movie": {..}}``)."""

        if not self._settings.trakt_client_id:
            logger.info("Trakt client id missing, skipping trending lookup")
            return Failure(FailureKind.UNAVAILABLE, "Trakt client id not configured")

        kind = "movies" if content_type == "movie" else "shows"
        return await fetch_json(
            self._client,
            f"/{kind}/trending",
            params={"page": page, "limit": limit},
            headers=self._headers(),
        )
