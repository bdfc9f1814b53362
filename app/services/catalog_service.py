"""High level orchestration for catalog and meta requests."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from ..catalogs import CatalogDefinition, CatalogRegistry
from ..config import Settings
from ..filters import filter_blocked
from ..models import ContentType, MetaItem, SourcedBatch, TMDBBatch
from ..pagination import PageWindow, parse_skip
from .normalizer import MetaNormalizer
from .tmdb import TMDBClient
from .trending import TrendingResolver
from .upstream import Failure, FailureKind

logger = logging.getLogger(__name__)

TMDB_ID_PREFIX = "tmdb:"


class CatalogService:
    """Coordinates catalog lookups, normalization and filtering."""

    def __init__(
        self,
        settings: Settings,
        registry: CatalogRegistry,
        trending: TrendingResolver,
        tmdb_client: TMDBClient,
        normalizer: MetaNormalizer,
    ):
        self._settings = settings
        self._registry = registry
        self._trending = trending
        self._tmdb = tmdb_client
        self._normalizer = normalizer

    @property
    def registry(self) -> CatalogRegistry:
        return self._registry

    async def get_catalog_payload(
        self,
        content_type: ContentType,
        catalog_id: str,
        skip: object = 0,
    ) -> dict[str, Any]:
        """Return ``{"metas": [...]}`` for one page of a catalog lane."""

        window = PageWindow(parse_skip(skip), self._settings.catalog_page_size)
        definition = self._registry.get(catalog_id)
        if definition is None:
            logger.info(
                "Catalog %s not found (%s)", catalog_id, FailureKind.UNKNOWN_CATALOG.value
            )
            return {"metas": []}
        if definition.content_type != content_type:
            logger.info(
                "Catalog %s serves %s, not %s", catalog_id, definition.content_type, content_type
            )
            return {"metas": []}

        batch = await self._resolve_batch(definition, window)
        metas = await self._normalize_batch(batch, content_type)
        visible = filter_blocked(metas, self._settings.blocked_keyword)
        logger.info(
            "Catalog %s page %s returned %s items (%s from %s)",
            catalog_id,
            window.page,
            len(visible),
            len(batch.items),
            batch.source.value,
        )
        return {"metas": [meta.to_meta() for meta in visible]}

    async def get_meta_payload(
        self, content_type: ContentType, meta_id: str
    ) -> dict[str, Any]:
        """Return ``{"meta": {...}}`` for a ``tmdb:<id>`` identifier."""

        if not meta_id.startswith(TMDB_ID_PREFIX):
            return {"meta": {}}
        tmdb_id = meta_id[len(TMDB_ID_PREFIX) :].strip()
        if not (tmdb_id.isascii() and tmdb_id.isdigit()):
            logger.info("Ignoring meta request for malformed id %r", meta_id)
            return {"meta": {}}

        result = await self._tmdb.fetch_details(content_type, tmdb_id)
        if isinstance(result, Failure):
            logger.error("Failed to fetch meta for %s: %s", meta_id, result.describe())
            return {"meta": {}}
        if not isinstance(result.data, dict):
            logger.error("Failed to fetch meta for %s: unexpected payload", meta_id)
            return {"meta": {}}

        item = dict(result.data)
        if not item.get("id"):
            item["id"] = tmdb_id
        try:
            meta = await self._normalizer.normalize_tmdb(
                item, content_type=content_type, details=result.data
            )
        except ValidationError as exc:
            logger.error("Failed to normalize meta for %s: %s", meta_id, exc)
            return {"meta": {}}
        return {"meta": meta.to_meta()}

    async def _resolve_batch(
        self, definition: CatalogDefinition, window: PageWindow
    ) -> SourcedBatch:
        if definition.is_trending:
            # Trending pages already match the consumer page size; no slice.
            return await self._trending.resolve(
                definition.content_type, window.page, window.page_size
            )

        result = await self._tmdb.discover(definition, page=window.page)
        items = TMDBClient.extract_results(result)
        return TMDBBatch(items=window.slice(items))

    async def _normalize_batch(
        self, batch: SourcedBatch, content_type: ContentType
    ) -> list[MetaItem]:
        """Normalize every item concurrently, keeping the batch order."""

        normalize = self._normalizer.for_batch(batch, content_type)
        limit = self._settings.enrichment_concurrency

        semaphore = asyncio.Semaphore(limit) if limit > 0 else None

        async def _run(item: dict[str, Any]) -> MetaItem:
            if semaphore is None:
                return await normalize(item)
            async with semaphore:
                return await normalize(item)

        results = await asyncio.gather(
            *(_run(item) for item in batch.items), return_exceptions=True
        )

        metas: list[MetaItem] = []
        for result in results:
            if isinstance(result, BaseException):
                logger.warning(
                    "Dropping %s item that failed to normalize: %r",
                    batch.source.value,
                    result,
                    exc_info=result,
                )
                continue
            metas.append(result)
        return metas
