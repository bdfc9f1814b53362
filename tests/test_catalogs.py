"""Catalog registry lookups and query templates."""

from __future__ import annotations

import pytest

from app.catalogs import CATALOGS, CatalogDefinition, CatalogRegistry


def test_trending_lanes_have_no_query() -> None:
    registry = CatalogRegistry()

    movies = registry.get("trending_movies")
    series = registry.get("trending_series")

    assert movies is not None and movies.is_trending
    assert movies.content_type == "movie"
    assert series is not None and series.is_trending
    assert series.content_type == "series"


def test_static_lane_rewrites_page_parameter() -> None:
    definition = CatalogRegistry().get("indian_series")

    assert definition is not None
    assert definition.path == "/discover/tv"
    assert definition.query_params(3) == {
        "with_origin_country": "IN",
        "without_networks": "3873",
        "page": 3,
    }


def test_list_endpoint_lane_only_carries_page() -> None:
    definition = CatalogRegistry().get("top_rated_movies")

    assert definition is not None
    assert definition.path == "/movie/top_rated"
    assert definition.query_params(1) == {"page": 1}


def test_unknown_catalog_returns_none() -> None:
    registry = CatalogRegistry()

    assert registry.get("does_not_exist") is None
    assert "does_not_exist" not in registry


def test_duplicate_keys_are_rejected() -> None:
    duplicate = CatalogDefinition(key="kdramas", title="Again", content_type="series")

    with pytest.raises(ValueError, match="Duplicate catalog key"):
        CatalogRegistry((*CATALOGS, duplicate))


def test_manifest_entries_advertise_skip_extra() -> None:
    registry = CatalogRegistry()
    entries = registry.manifest_entries()

    assert len(entries) == len(registry) == 22
    assert entries[0] == {
        "type": "movie",
        "id": "trending_movies",
        "name": "Trending Movies",
        "extra": [{"name": "skip", "isRequired": False}],
    }
    assert {entry["type"] for entry in entries} == {"movie", "series"}
