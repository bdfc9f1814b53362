"""Trending lists with Trakt as the primary source and TMDB as fallback."""

from __future__ import annotations

import logging

from ..models import ContentType, SourcedBatch, TMDBBatch, TraktBatch
from .tmdb import TMDBClient
from .trakt import TraktClient
from .upstream import Failure, FailureKind, FetchResult, Ok

logger = logging.getLogger(__name__)


class TrendingResolver:
    """Resolve trending items, falling back to TMDB when Trakt has nothing."""

    def __init__(self, trakt_client: TraktClient, tmdb_client: TMDBClient):
        self._trakt = trakt_client
        self._tmdb = tmdb_client

    async def resolve(
        self, content_type: ContentType, page: int = 1, page_size: int = 20
    ) -> SourcedBatch:
        primary = self._check_primary(
            await self._trakt.fetch_trending(content_type, page=page, limit=page_size)
        )
        if isinstance(primary, Ok):
            return TraktBatch(items=primary.data)

        logger.warning(
            "Trakt trending failed for %s page %s (%s), falling back to TMDB",
            content_type,
            page,
            primary.describe(),
        )
        fallback = await self._tmdb.fetch_trending(content_type, page=page)
        return TMDBBatch(items=TMDBClient.extract_results(fallback))

    @staticmethod
    def _check_primary(result: FetchResult) -> FetchResult:
        if isinstance(result, Failure):
            return result
        if not isinstance(result.data, list):
            return Failure(FailureKind.MALFORMED, "expected a list of envelopes")
        if not result.data:
            return Failure(FailureKind.EMPTY)
        return result
