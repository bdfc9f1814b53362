"""Entry point for the FastAPI-powered Stremio addon."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any
from urllib.parse import parse_qs

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalogs import CatalogRegistry
from .config import settings
from .services.catalog_service import CatalogService
from .services.normalizer import MetaNormalizer
from .services.tmdb import TMDBClient
from .services.trakt import TraktClient
from .services.trending import TrendingResolver

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SUPPORTED_TYPES = {"movie", "series"}

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    trakt_http = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.trakt_api_url),
            timeout=httpx.Timeout(20.0, connect=10.0),
        )
    )
    tmdb_http = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.tmdb_api_url),
            timeout=httpx.Timeout(15.0, connect=5.0),
        )
    )

    tmdb = TMDBClient(settings, tmdb_http)
    trakt = TraktClient(settings, trakt_http)
    fastapi_app.state.catalog_service = CatalogService(
        settings,
        CatalogRegistry(),
        TrendingResolver(trakt, tmdb),
        tmdb,
        MetaNormalizer(settings, tmdb),
    )
    if not settings.tmdb_api_key:
        logger.warning("TMDB_API_KEY is not set; TMDB lookups will return no data")
    if not settings.trakt_client_id:
        logger.warning("TRAKT_CLIENT_ID is not set; trending lanes will use TMDB")
    logger.info(
        "%s running at http://127.0.0.1:%s/manifest.json",
        settings.app_name,
        settings.server_port,
    )

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Trending and curated Stremio catalogs backed by Trakt and TMDB",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_catalog_service(app: FastAPI) -> CatalogService:
    service = getattr(app.state, "catalog_service", None)
    if not isinstance(service, CatalogService):
        raise RuntimeError("Catalog service not initialised")
    return service


def parse_extra(raw: str | None) -> dict[str, str]:
    """Parse Stremio's ``skip=20&genre=Drama`` extra path segment."""

    if not raw:
        return {}
    parsed = parse_qs(raw, keep_blank_values=True)
    return {key: values[-1] for key, values in parsed.items() if values}


def register_routes(fastapi_app: FastAPI) -> None:
    def _require_type(content_type: str) -> None:
        if content_type not in SUPPORTED_TYPES:
            raise HTTPException(status_code=400, detail="Unsupported content type")

    async def _catalog_endpoint(
        request: Request,
        content_type: str,
        catalog_id: str,
        *,
        extra: dict[str, str] | None = None,
    ) -> JSONResponse:
        _require_type(content_type)
        service = get_catalog_service(fastapi_app)
        options = dict(request.query_params)
        if extra:
            options.update(extra)
        payload = await service.get_catalog_payload(
            content_type,  # type: ignore[arg-type]
            catalog_id,
            skip=options.get("skip"),
        )
        return JSONResponse(payload)

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/manifest.json")
    async def manifest() -> dict[str, Any]:
        service = get_catalog_service(fastapi_app)
        return {
            "id": "com.megacatalog.python",
            "version": "1.0.0",
            "name": settings.app_name,
            "description": "Trending, top rated and regional catalogs from Trakt and TMDB.",
            "catalogs": service.registry.manifest_entries(),
            "resources": ["catalog", "meta"],
            "types": ["movie", "series"],
            "idPrefixes": ["tt", "tmdb:"],
        }

    @fastapi_app.get("/catalog/{content_type}/{catalog_id}.json")
    async def catalog(
        request: Request, content_type: str, catalog_id: str
    ) -> JSONResponse:
        return await _catalog_endpoint(request, content_type, catalog_id)

    @fastapi_app.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
    async def catalog_with_extra(
        request: Request, content_type: str, catalog_id: str, extra: str
    ) -> JSONResponse:
        return await _catalog_endpoint(
            request, content_type, catalog_id, extra=parse_extra(extra)
        )

    @fastapi_app.get("/meta/{content_type}/{meta_id}.json")
    async def meta(content_type: str, meta_id: str) -> JSONResponse:
        _require_type(content_type)
        service = get_catalog_service(fastapi_app)
        payload = await service.get_meta_payload(content_type, meta_id)  # type: ignore[arg-type]
        return JSONResponse(payload)


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
