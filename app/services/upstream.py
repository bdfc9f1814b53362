"""Shared JSON fetch helper for upstream metadata providers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import httpx

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    """Reasons an upstream lookup produced no usable data."""

    UNAVAILABLE = "upstream_unavailable"
    MALFORMED = "upstream_malformed"
    EMPTY = "upstream_empty"
    UNKNOWN_CATALOG = "unknown_catalog"


@dataclass(slots=True, frozen=True)
class Ok:
    """Parsed JSON payload returned by a provider."""

    data: Any


@dataclass(slots=True, frozen=True)
class Failure:
    """Upstream failure carrying its kind and a short description."""

    kind: FailureKind
    error: str = ""

    def describe(self) -> str:
        if self.error:
            return f"{self.kind.value}: {self.error}"
        return self.kind.value


FetchResult = Ok | Failure


async def fetch_json(
    client: httpx.AsyncClient,
    path: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> FetchResult:
    """Issue a GET request and return the decoded JSON body or a failure."""

    try:
        response = await client.get(
            path,
            params=dict(params) if params else None,
            headers=dict(headers) if headers else None,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning(
            "Request to %s failed (%s): %s", path, exc.__class__.__name__, exc
        )
        return Failure(FailureKind.UNAVAILABLE, str(exc) or exc.__class__.__name__)

    if response.status_code >= 400:
        logger.warning("Request to %s returned HTTP %s", path, response.status_code)
        return Failure(FailureKind.UNAVAILABLE, f"HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        logger.warning("Unexpected non-JSON response from %s", path)
        return Failure(FailureKind.MALFORMED, str(exc))
    return Ok(data)
