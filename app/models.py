"""Pydantic models and containers describing catalog payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["movie", "series"]

UNTITLED = "Untitled"


class ProviderSource(str, Enum):
    """Upstream provider that produced a batch of raw items."""

    TRAKT = "trakt"
    TMDB = "tmdb"


@dataclass(slots=True, frozen=True)
class TraktBatch:
    """Trending envelopes returned by Trakt."""

    source: ClassVar[ProviderSource] = ProviderSource.TRAKT

    items: list[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class TMDBBatch:
    """List results returned by TMDB trending, discover or list endpoints."""

    source: ClassVar[ProviderSource] = ProviderSource.TMDB

    items: list[dict[str, Any]] = field(default_factory=list)


SourcedBatch = TraktBatch | TMDBBatch


class MetaItem(BaseModel):
    """Represents a single media entry returned to Stremio."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    type: ContentType
    name: str = Field(default=UNTITLED, min_length=1)
    poster: str | None = None
    background: str | None = None
    description: str = ""
    release_info: str = Field(default="", alias="releaseInfo")

    @field_validator("poster", "background")
    @classmethod
    def _require_absolute_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("Image URLs must be absolute")
        return value

    @field_validator("release_info", mode="before")
    @classmethod
    def _stringify_release(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, int):
            return str(value)
        return value

    def to_meta(self) -> dict[str, object]:
        """Return a Stremio-compatible meta object."""

        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "poster": self.poster,
            "background": self.background,
            "description": self.description,
            "releaseInfo": self.release_info,
        }
