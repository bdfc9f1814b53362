"""Map Trakt and TMDB records onto the canonical Stremio meta shape."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Mapping

from ..config import Settings
from ..models import UNTITLED, ContentType, MetaItem, SourcedBatch, TraktBatch
from ..utils import build_image_url, fallback_meta_id
from .tmdb import TMDBClient
from .upstream import Failure, FetchResult

logger = logging.getLogger(__name__)

POSTER_SIZE = "w500"
BACKDROP_SIZE = "w780"


@dataclass(slots=True, frozen=True)
class Enriched:
    """Enrichment payload fetched from TMDB."""

    payload: Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class Degraded:
    """Enrichment step that produced nothing usable."""

    reason: str


EnrichmentResult = Enriched | Degraded
ItemNormalizer = Callable[[dict[str, Any]], Awaitable[MetaItem]]


def _text(*values: object) -> str:
    """Return the first non-blank string among ``values`` or ``""``."""

    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return ""


def _release_year(value: object) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _text(value)


def _as_step(result: FetchResult) -> EnrichmentResult:
    if isinstance(result, Failure):
        return Degraded(result.describe())
    if not isinstance(result.data, dict):
        return Degraded("unexpected payload shape")
    return Enriched(result.data)


class MetaNormalizer:
    """Normalizes provider-native records, enriching them through TMDB."""

    def __init__(self, settings: Settings, tmdb_client: TMDBClient):
        self._image_base = settings.image_base_url
        self._tmdb = tmdb_client

    def for_batch(self, batch: SourcedBatch, content_type: ContentType) -> ItemNormalizer:
        """Return the normalization branch matching the batch's provider."""

        if isinstance(batch, TraktBatch):
            return partial(self.normalize_trakt, content_type=content_type)
        return partial(self.normalize_tmdb, content_type=content_type)

    async def normalize_trakt(
        self, envelope: dict[str, Any], *, content_type: ContentType
    ) -> MetaItem:
        """Normalize a Trakt trending envelope."""

        key = "movie" if content_type == "movie" else "show"
        node = envelope.get(key) if isinstance(envelope, dict) else None
        if not isinstance(node, dict):
            node = {}
        ids = node.get("ids") if isinstance(node.get("ids"), dict) else {}

        name = _text(node.get("title"), node.get("name")) or UNTITLED
        tmdb_id = ids.get("tmdb")
        meta_id = _text(ids.get("imdb")) or (
            fallback_meta_id("tmdb", tmdb_id, title=name)
            if tmdb_id
            else fallback_meta_id("trakt", ids.get("trakt"), title=name)
        )
        poster: str | None = None
        background: str | None = None

        if tmdb_id:
            step = await self._details_step(content_type, tmdb_id)
            if isinstance(step, Enriched):
                poster, background = self._artwork(step.payload)
                meta_id = _text(step.payload.get("imdb_id")) or meta_id
            else:
                logger.debug("TMDB enrichment degraded for Trakt item %s: %s", meta_id, step.reason)

        return MetaItem(
            id=meta_id,
            type=content_type,
            name=name,
            poster=poster,
            background=background,
            description=_text(node.get("overview")),
            release_info=_release_year(node.get("year")),
        )

    async def normalize_tmdb(
        self,
        item: dict[str, Any],
        *,
        content_type: ContentType,
        details: Mapping[str, Any] | None = None,
    ) -> MetaItem:
        """Normalize a TMDB list result or detail payload.

        ``details`` short-circuits the detail lookup when the caller already
        holds the item's detail payload.
        """

        tmdb_id = item.get("id")
        name = _text(item.get("title"), item.get("name")) or UNTITLED
        fallback_id = fallback_meta_id("tmdb", tmdb_id, title=name)

        steps = await self._tmdb_steps(content_type, tmdb_id, details)
        degraded = [step for step in steps if isinstance(step, Degraded)]
        if degraded:
            logger.debug(
                "TMDB enrichment degraded for %s: %s",
                fallback_id,
                "; ".join(step.reason for step in degraded),
            )
            meta_id = fallback_id
            poster, background = self._artwork(item)
        else:
            external, artwork = steps[0], steps[-1]
            meta_id = (
                _text(external.payload.get("imdb_id"), item.get("imdb_id")) or fallback_id
            )
            poster, background = self._artwork(artwork.payload)

        return MetaItem(
            id=meta_id,
            type=content_type,
            name=name,
            poster=poster,
            background=background,
            description=_text(item.get("overview")),
            release_info=_text(item.get("release_date"), item.get("first_air_date")),
        )

    async def _tmdb_steps(
        self,
        content_type: ContentType,
        tmdb_id: object,
        details: Mapping[str, Any] | None,
    ) -> list[EnrichmentResult]:
        """Run the enrichment steps in order, stopping at the first degraded one.

        The first step yields the IMDb id and the last one the artwork; movies
        get both from a single details call.
        """

        if tmdb_id in (None, ""):
            return [Degraded("missing TMDB id")]

        steps: list[EnrichmentResult] = []
        if content_type == "series":
            external = _as_step(await self._tmdb.fetch_external_ids(tmdb_id))
            steps.append(external)
            if isinstance(external, Degraded):
                return steps

        if details is not None:
            steps.append(Enriched(details))
        else:
            steps.append(await self._details_step(content_type, tmdb_id))
        return steps

    async def _details_step(
        self, content_type: ContentType, tmdb_id: object
    ) -> EnrichmentResult:
        return _as_step(await self._tmdb.fetch_details(content_type, tmdb_id))

    def _artwork(self, payload: Mapping[str, Any]) -> tuple[str | None, str | None]:
        return (
            build_image_url(payload.get("poster_path"), self._image_base, POSTER_SIZE),
            build_image_url(payload.get("backdrop_path"), self._image_base, BACKDROP_SIZE),
        )
