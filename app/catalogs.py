"""Static catalog lane definitions served to Stremio."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .models import ContentType


@dataclass(frozen=True)
class CatalogDefinition:
    """Describes a fixed catalog lane shown in Stremio.

    Lanes without a ``path`` are dynamic and resolved through the trending
    resolver; all others map onto a TMDB list or discover endpoint with a fixed
    set of filters.
    """

    key: str
    title: str
    content_type: ContentType
    path: str | None = None
    params: tuple[tuple[str, str], ...] = ()

    @property
    def is_trending(self) -> bool:
        return self.path is None

    def query_params(self, page: int) -> dict[str, str | int]:
        """Return the lane's filters with the page parameter rewritten."""

        params: dict[str, str | int] = dict(self.params)
        params["page"] = page
        return params

    def to_manifest_entry(self) -> dict[str, object]:
        return {
            "type": self.content_type,
            "id": self.key,
            "name": self.title,
            "extra": [{"name": "skip", "isRequired": False}],
        }


def _discover(
    key: str, title: str, content_type: ContentType, **filters: str
) -> CatalogDefinition:
    path = "/discover/movie" if content_type == "movie" else "/discover/tv"
    return CatalogDefinition(
        key=key,
        title=title,
        content_type=content_type,
        path=path,
        params=tuple(filters.items()),
    )


CATALOGS: tuple[CatalogDefinition, ...] = (
    CatalogDefinition(key="trending_movies", title="Trending Movies", content_type="movie"),
    CatalogDefinition(key="trending_series", title="Trending Series", content_type="series"),
    CatalogDefinition(
        key="top_rated_movies",
        title="Top Rated Movies",
        content_type="movie",
        path="/movie/top_rated",
    ),
    CatalogDefinition(
        key="top_rated_series",
        title="Top Rated Series",
        content_type="series",
        path="/tv/top_rated",
    ),
    CatalogDefinition(
        key="tv_popular",
        title="Popular Series",
        content_type="series",
        path="/tv/popular",
    ),
    _discover("action_movies", "Action & Adventure", "movie", with_genres="28,12"),
    _discover("comedy_movies", "Comedy Movies", "movie", with_genres="35"),
    _discover("drama_movies", "Drama Movies", "movie", with_genres="18"),
    _discover("horror_movies", "Horror & Mystery Movies", "movie", with_genres="27,9648"),
    _discover("scifi_movies", "Sci-Fi & Fantasy Movies", "movie", with_genres="878,14"),
    _discover("crime_movies", "Crime & Thriller Movies", "movie", with_genres="80,53"),
    _discover("tv_action", "Action & Adventure Series", "series", with_genres="10759"),
    _discover("tv_comedy", "Comedy Series", "series", with_genres="35"),
    _discover("tv_drama", "Drama Series", "series", with_genres="18"),
    _discover("tv_horror", "Mystery & War Series", "series", with_genres="9648,10768"),
    _discover("tv_scifi", "Sci-Fi & Fantasy Series", "series", with_genres="10765"),
    _discover("tv_crime", "Crime & Mystery Series", "series", with_genres="80,9648"),
    _discover(
        "indian_movies",
        "Indian Movies",
        "movie",
        with_origin_country="IN",
        without_networks="3873",
    ),
    _discover(
        "indian_series",
        "Indian Series",
        "series",
        with_origin_country="IN",
        without_networks="3873",
    ),
    _discover("kdramas", "K-Dramas", "series", with_original_language="ko"),
    _discover("us_tv", "US Series", "series", with_origin_country="US"),
    _discover("uk_tv", "UK Series", "series", with_origin_country="GB"),
)


class CatalogRegistry:
    """Read-only lookup of catalog lanes by identifier."""

    def __init__(self, definitions: Iterable[CatalogDefinition] = CATALOGS):
        self._definitions = tuple(definitions)
        by_key: dict[str, CatalogDefinition] = {}
        for definition in self._definitions:
            if definition.key in by_key:
                raise ValueError(f"Duplicate catalog key: {definition.key}")
            by_key[definition.key] = definition
        self._by_key: Mapping[str, CatalogDefinition] = MappingProxyType(by_key)

    def get(self, catalog_id: str) -> CatalogDefinition | None:
        return self._by_key.get(catalog_id)

    def manifest_entries(self) -> list[dict[str, object]]:
        """Return manifest catalog entries in declaration order."""

        return [definition.to_manifest_entry() for definition in self._definitions]

    def __contains__(self, catalog_id: object) -> bool:
        return catalog_id in self._by_key

    def __iter__(self) -> Iterator[CatalogDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
