"""Tests for the shared upstream fetch helper and provider clients."""

from __future__ import annotations

import httpx
import pytest

from app.catalogs import CatalogRegistry
from app.services.tmdb import TMDBClient
from app.services.trakt import TraktClient
from app.services.upstream import Failure, FailureKind, Ok, fetch_json


@pytest.mark.anyio
async def test_fetch_json_returns_parsed_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [1, 2]})

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.example.com"
    ) as client:
        result = await fetch_json(client, "/list", params={"page": 2})

    assert result == Ok({"results": [1, 2]})


@pytest.mark.anyio
async def test_fetch_json_reports_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.example.com"
    ) as client:
        result = await fetch_json(client, "/list")

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.UNAVAILABLE
    assert "connection refused" in result.error


@pytest.mark.anyio
async def test_fetch_json_reports_non_json_bodies() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>Cloudflare</html>")

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.example.com"
    ) as client:
        result = await fetch_json(client, "/list")

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.MALFORMED


@pytest.mark.anyio
async def test_fetch_json_reports_invalid_urls() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("request should not be sent")

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.example.com"
    ) as client:
        result = await fetch_json(client, "/movie/6\x0703")

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.UNAVAILABLE


@pytest.mark.anyio
async def test_fetch_json_reports_error_statuses() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.example.com"
    ) as client:
        result = await fetch_json(client, "/list")

    assert result == Failure(FailureKind.UNAVAILABLE, "HTTP 503")


@pytest.mark.anyio
async def test_trakt_trending_sends_api_headers(build_settings) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[])

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.trakt.tv"
    ) as http_client:
        client = TraktClient(build_settings(), http_client)
        await client.fetch_trending("series", page=3, limit=20)

    assert len(requests) == 1
    request = requests[0]
    assert request.url.path == "/shows/trending"
    assert request.url.params["page"] == "3"
    assert request.url.params["limit"] == "20"
    assert request.headers["trakt-api-key"] == "trakt-key"
    assert request.headers["trakt-api-version"] == "2"


@pytest.mark.anyio
async def test_missing_keys_fail_without_requests(build_settings) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={})

    settings = build_settings(TMDB_API_KEY=None, TRAKT_CLIENT_ID=None)
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://api.example.com"
    ) as http_client:
        trakt_result = await TraktClient(settings, http_client).fetch_trending("movie")
        tmdb_result = await TMDBClient(settings, http_client).fetch_details("movie", 603)

    assert isinstance(trakt_result, Failure)
    assert isinstance(tmdb_result, Failure)
    assert trakt_result.kind is FailureKind.UNAVAILABLE
    assert requests == []


@pytest.mark.anyio
async def test_tmdb_discover_uses_lane_filters(build_settings) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"results": [{"id": 1}, "junk"]})

    definition = CatalogRegistry().get("kdramas")
    assert definition is not None

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://api.themoviedb.org/3",
    ) as http_client:
        client = TMDBClient(build_settings(), http_client)
        result = await client.discover(definition, page=4)

    assert TMDBClient.extract_results(result) == [{"id": 1}]
    request = requests[0]
    assert request.url.path == "/3/discover/tv"
    assert request.url.params["with_original_language"] == "ko"
    assert request.url.params["page"] == "4"
    assert request.url.params["api_key"] == "tmdb-key"


def test_extract_results_handles_failures_and_missing_field() -> None:
    assert TMDBClient.extract_results(Failure(FailureKind.UNAVAILABLE)) == []
    assert TMDBClient.extract_results(Ok({"page": 1})) == []
    assert TMDBClient.extract_results(Ok([1, 2, 3])) == []
