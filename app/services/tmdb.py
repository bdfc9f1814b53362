"""Utilities for resolving metadata from The Movie Database (TMDB)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..catalogs import CatalogDefinition
from ..config import Settings
from ..models import ContentType
from .upstream import Failure, FailureKind, FetchResult, fetch_json

logger = logging.getLogger(__name__)


def media_segment(content_type: ContentType) -> str:
    """Return the TMDB path segment for a Stremio content type."""

    return "movie" if content_type == "movie" else "tv"


class TMDBClient:
    """Client for the TMDB list, detail and external id endpoints."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> FetchResult:
        if not self._settings.tmdb_api_key:
            logger.info("TMDB API key missing, skipping %s", path)
            return Failure(FailureKind.UNAVAILABLE, "TMDB API key not configured")
        request_params: dict[str, Any] = {"api_key": self._settings.tmdb_api_key}
        if params:
            request_params.update(params)
        return await fetch_json(self._client, path, params=request_params)

    async def fetch_trending(self, content_type: ContentType, *, page: int = 1) -> FetchResult:
        """Fetch the weekly trending list for movies or TV."""

        return await self._get(
            f"/trending/{media_segment(content_type)}/week", {"page": page}
        )

    async def fetch_details(
        self, content_type: ContentType, tmdb_id: object
    ) -> FetchResult:
        return await self._get(f"/{media_segment(content_type)}/{tmdb_id}")

    async def fetch_external_ids(self, tmdb_id: object) -> FetchResult:
        """Fetch external identifiers (IMDb, TVDB, ...) for a TV show."""

        return await self._get(f"/tv/{tmdb_id}/external_ids")

    async def discover(self, definition: CatalogDefinition, *, page: int = 1) -> FetchResult:
        """Run a catalog lane's list or discover query for one page."""

        if definition.path is None:
            raise ValueError(f"Catalog {definition.key} has no TMDB query")
        return await self._get(definition.path, definition.query_params(page))

    @staticmethod
    def extract_results(result: FetchResult) -> list[dict[str, Any]]:
        """Return the ``results`` array of a list response, or an empty list."""

        if isinstance(result, Failure):
            return []
        payload = result.data
        if not isinstance(payload, dict):
            logger.warning("Unexpected TMDB list payload of type %s", type(payload).__name__)
            return []
        results = payload.get("results") or []
        if not isinstance(results, list):
            return []
        return [entry for entry in results if isinstance(entry, dict)]
